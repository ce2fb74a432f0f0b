"""Schemas for passkey ceremonies.

Options and authenticator responses are WebAuthn JSON structures passed
through verbatim; only the envelopes around them are modelled here.
"""

from pydantic import Field

from .common import CamelModel


class HasPasskeyResponse(CamelModel):
    """Whether the caller has registered at least one passkey."""

    has_passkey: bool = Field(..., description="True if one or more passkeys exist")
