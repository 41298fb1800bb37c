"""Presence probes for the package and version managers.

This module exports the scanner classes used to check whether catalog
items are already installed.
"""

from provctl.scanners.base import Scanner
from provctl.scanners.brew import BrewCaskScanner, BrewFormulaScanner, BrewScanner
from provctl.scanners.mise import MiseScanner, parse_spec

__all__ = [
    "BrewCaskScanner",
    "BrewFormulaScanner",
    "BrewScanner",
    "MiseScanner",
    "Scanner",
    "parse_spec",
]
