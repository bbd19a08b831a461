# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/errors.py

"""
FairOS error hierarchy.

Each API group raises its own subclass so callers can tell a failed pod
call from a failed kv call. The server message and HTTP status are kept
on the exception.
"""


class FairOSError(Exception):
    """Base exception for FairOS client errors."""

    def __init__(self, message: str = "", status_code: int = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CouldNotConnectError(FairOSError):
    """Raised when the server cannot be reached."""
    pass


class FairOSUserError(FairOSError):
    """Raised when a user account call fails."""
    pass


class UsernameAlreadyExistsError(FairOSUserError):
    pass


class InvalidUsernameError(FairOSUserError):
    pass


class InvalidPasswordError(FairOSUserError):
    pass


class FairOSPodError(FairOSError):
    """Raised when a pod call fails."""
    pass


class FairOSFileSystemError(FairOSError):
    """Raised when a directory or file call fails."""
    pass


class FairOSKeyValueError(FairOSError):
    """Raised when a key-value store call fails."""
    pass


class FairOSDocumentError(FairOSError):
    """Raised when a document database call fails."""
    pass
