"""
Exceptions raised by the ownership transfer tools.

Every error is a TransferError so the command-line entry points can report
it and exit with status 1.
"""

from typing import Any, Optional


class TransferError(Exception):
    """Base exception for ownership transfer errors."""

    pass


class MissingCredentialsFile(TransferError):
    """Raised when the OAuth client secret file does not exist."""

    pass


class MissingTokenFile(TransferError):
    """Raised when no stored token is available for non-interactive use."""

    pass


class MalformedJSON(TransferError):
    """Raised when a credential or token file cannot be parsed."""

    pass


class TokenWriteError(TransferError):
    """Raised when the token file cannot be written."""

    pass


class AuthorizationExchangeFailure(TransferError):
    """Raised when an authorization code cannot be exchanged for tokens."""

    pass


class AuthorizationStateError(TransferError):
    """Raised when an authorizer operation is invalid in its current state."""

    pass


class DriveAPIError(TransferError):
    """
    Raised when a Drive API call fails.

    Attributes:
        status_code: HTTP status code, or None for network errors
        details: Structured error list returned by the API, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ResourceNotFoundOrForbidden(DriveAPIError):
    """Raised when the file does not exist or is not accessible."""

    pass


class PermissionAPIFailure(DriveAPIError):
    """Raised when listing, creating or updating a permission fails."""

    pass
