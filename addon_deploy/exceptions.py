"""Exceptions related to addon-deploy."""

__all__ = [
    "AddonException",
    "ConfigurationError",
    "NotFoundError",
    "ExternalToolError",
    "HelmException",
    "RctlException",
]


class AddonException(Exception):
    """Generic base exception used for this library."""


class ConfigurationError(AddonException):
    """Raised when the inputs or the spec document are not formatted as expected."""


class NotFoundError(AddonException):
    """Raised when a referenced file or directory does not exist."""


class ExternalToolError(AddonException):
    """Raised when there is a failure running an external tool."""


class HelmException(ExternalToolError):
    """Raised when there is a failure running a helm command."""


class RctlException(ExternalToolError):
    """Raised when there is a failure running an rctl command."""
