"""Custom exceptions for ACP patch operations."""

from typing import Any


class AcpPatchError(Exception):
    """Base exception for ACP patch operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class AcpPatchAnchorError(AcpPatchError):
    """Raised when the insertion anchor cannot be found in the target content."""


class AcpPatchBackupError(AcpPatchError):
    """Raised when a restore is requested but no backup exists."""


class AcpPatchConfigError(AcpPatchError):
    """Raised when a configuration file is malformed."""
