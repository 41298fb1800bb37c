"""Install operators for the package and version managers.

This module provides the abstract Operator and the concrete Homebrew
and mise implementations.
"""

from provctl.operators.base import Operator
from provctl.operators.brew import BrewCaskOperator, BrewFormulaOperator, BrewOperator
from provctl.operators.mise import MiseOperator

__all__ = [
    "BrewCaskOperator",
    "BrewFormulaOperator",
    "BrewOperator",
    "MiseOperator",
    "Operator",
]
