"""Provisioning error hierarchy.

Every stage of a run raises a subclass of ProvisionError on failure. The
first one aborts the whole run; nothing is retried or rolled back.
"""


class ProvisionError(Exception):
    """Base exception for failed provisioning steps."""


class FileAppendError(ProvisionError):
    """Raised when the shell profile or hosts file cannot be appended to."""


class BootstrapError(ProvisionError):
    """Raised when the package manager cannot be installed."""


class InstallError(ProvisionError):
    """Raised when a catalog item fails to install."""


class DefaultVersionError(ProvisionError):
    """Raised when global default toolchain versions cannot be set."""


class DownloadError(ProvisionError):
    """Raised when an artifact cannot be fetched or fails verification."""
