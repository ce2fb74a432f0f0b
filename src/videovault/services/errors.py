"""Exceptions raised by the passkey and decision services.

Endpoints translate these into HTTP responses; each carries the status code
it maps to so the translation stays in one place.
"""

from __future__ import annotations

from fastapi import status


class VerificationServiceError(RuntimeError):
    """Base exception for all verification-service failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class PasskeyRequiredError(VerificationServiceError):
    """Raised when a credentialed action is attempted without a passkey or assertion."""


class PasskeyVerificationError(VerificationServiceError):
    """Raised for any failed WebAuthn ceremony.

    The underlying cause (challenge, origin, signature, counter) is logged but
    never exposed to the caller.
    """

    def __init__(self, detail: str = "Passkey verification failed") -> None:
        super().__init__(detail)


class DuplicateCredentialError(VerificationServiceError):
    """Raised when an authenticator returns an already-registered credential id."""


class NotFoundError(VerificationServiceError):
    """Raised when a named record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(VerificationServiceError):
    """Raised when the caller may not act on a record."""

    status_code = status.HTTP_403_FORBIDDEN


class RequestNotFoundError(NotFoundError):
    """Raised when a verification request does not exist."""


class RequestOwnershipError(PermissionDeniedError):
    """Raised when a reviewer acts on a request addressed to someone else."""


class RequestNotPendingError(VerificationServiceError):
    """Raised when a request has already left the pending state."""

    status_code = status.HTTP_409_CONFLICT


class InvalidBatchError(VerificationServiceError):
    """Raised when batch validation rejects the request list as a whole."""


class InvalidSelectionError(VerificationServiceError):
    """Raised when a creator's reviewer selection cannot be used."""


class DuplicateAuthRequestError(VerificationServiceError):
    """Raised when a creator asks for authorization a second time."""


class InvalidVideoError(VerificationServiceError):
    """Raised when video metadata is missing a required field."""
