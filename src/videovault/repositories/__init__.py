"""Data access helpers for passkeys and verification requests."""

from .credential_repo import CredentialRepository
from .verification_repo import VerificationRequestRepository

__all__ = ["CredentialRepository", "VerificationRequestRepository"]
