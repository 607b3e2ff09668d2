# (c) Copyright Datacraft, 2026
"""WebAuthn/FIDO2 credential verification."""

from .verifier import (
	CredentialVerifier,
	IssuedChallenge,
	RegistrationOutcome,
	AuthenticationOutcome,
)
from .service import WebAuthnVerifier

__all__ = [
	"CredentialVerifier",
	"IssuedChallenge",
	"RegistrationOutcome",
	"AuthenticationOutcome",
	"WebAuthnVerifier",
]
