"""Service layer for passkey ceremonies and verification decisions."""
