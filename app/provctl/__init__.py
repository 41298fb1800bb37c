"""provctl - Declarative developer workstation provisioning for macOS."""

__version__ = "0.1.0"
