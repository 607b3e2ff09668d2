# (c) Copyright Datacraft, 2026
"""Credential verifier capability."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from passkey_server.schema import Credential


@dataclass
class IssuedChallenge:
	"""Client-facing options plus the challenge they embed."""
	options: dict[str, Any]
	challenge: str  # Base64URL encoded


@dataclass
class RegistrationOutcome:
	"""Result of checking an attestation response."""
	verified: bool
	reason: str | None = None
	credential_id: str | None = None
	public_key: str | None = None
	counter: int = 0
	device_type: str | None = None
	backed_up: bool = False


@dataclass
class AuthenticationOutcome:
	"""Result of checking an assertion response."""
	verified: bool
	reason: str | None = None
	new_counter: int = 0


class CredentialVerifier(ABC):
	"""Generates ceremony options and checks authenticator responses.

	Verification never raises for a bad response; malformed payloads,
	signature mismatches and counter replays all come back as an
	outcome with ``verified=False`` and a reason.
	"""

	@abstractmethod
	async def registration_options(
		self,
		user_id: str,
		user_name: str,
	) -> IssuedChallenge:
		...

	@abstractmethod
	async def verify_registration(
		self,
		response: dict[str, Any],
		expected_challenge: str,
	) -> RegistrationOutcome:
		...

	@abstractmethod
	async def authentication_options(
		self,
		credential: Credential,
	) -> IssuedChallenge:
		...

	@abstractmethod
	async def verify_authentication(
		self,
		response: dict[str, Any],
		expected_challenge: str,
		credential: Credential,
	) -> AuthenticationOutcome:
		"""Check an assertion against the stored credential.

		A sign counter that does not advance past ``credential.counter``
		must be rejected.
		"""
