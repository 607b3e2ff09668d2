# (c) Copyright Datacraft, 2026
"""Ceremony services."""
from .results import ChallengeResponse, CeremonyResult
from .registration import RegistrationService
from .authentication import AuthenticationService

__all__ = [
	"ChallengeResponse",
	"CeremonyResult",
	"RegistrationService",
	"AuthenticationService",
]
