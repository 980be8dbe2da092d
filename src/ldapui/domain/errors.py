from __future__ import annotations

"""
Error Taxonomy.

Exceptions raised by the directory model. All of them are recoverable
from the caller's perspective: the session converts them into user
alerts and the triggering action may simply be retried.
"""

from typing import Optional


class DirectoryError(Exception):
    """Base class for every failure raised by this package."""


class TransportFailure(DirectoryError):
    """
    The directory service was unreachable or answered with a non-success status.

    Attributes:
        status: HTTP status code, or None when no response was received.
        message: Server-provided body or the underlying transport error.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.status}: {self.message}"


class ValidationFailure(DirectoryError):
    """Input rejected locally, before any network call was made."""


class UnknownIdentifierError(ValidationFailure):
    """A DN could not be located in the loaded tree or on the server."""


class LoadInProgressError(DirectoryError):
    """A load was requested for a DN whose previous load has not finished."""

    def __init__(self, dn: str) -> None:
        super().__init__(f"Load already in progress for: {dn or '<root>'}")
        self.dn = dn
