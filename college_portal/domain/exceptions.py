"""Error taxonomy shared by the domain, application and interface layers."""

from __future__ import annotations

from dataclasses import dataclass


class PortalError(Exception):
    """Base class for expected failures raised by portal use cases."""


@dataclass(frozen=True)
class FieldError:
    """A single violated field reported back to the client."""

    field: str
    message: str


class ValidationError(PortalError):
    """Raised when input is malformed or out of range.

    Every violated field is collected before raising so clients can fix all of
    them in one round trip.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{error.field}: {error.message}" for error in self.errors)
        super().__init__(summary or "Validation failed")


class AuthenticationError(PortalError):
    """Raised when credentials do not identify a portal account."""


class NotFoundError(PortalError):
    """Raised when an identifier does not resolve to a stored record."""


class ForbiddenError(PortalError):
    """Raised when the actor lacks the role or ownership for an operation."""


class DependencyError(PortalError):
    """Raised when an external collaborator (email, storage) fails."""


class EmailDeliveryError(DependencyError):
    """Raised when the email transport does not accept a message."""

    def __init__(self, recipient: str, reason: str | None = None) -> None:
        self.recipient = recipient
        message = f"Email delivery to {recipient} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StorageError(DependencyError):
    """Raised when attachment bytes cannot be stored."""


__all__ = [
    "AuthenticationError",
    "DependencyError",
    "EmailDeliveryError",
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "PortalError",
    "StorageError",
    "ValidationError",
]
