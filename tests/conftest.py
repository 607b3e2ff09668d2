# (c) Copyright Datacraft, 2026
"""Shared fixtures: a deterministic verifier, a settable clock and stores."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from passkey_server.config import Settings
from passkey_server.db import create_db_engine, get_session_factory, init_db
from passkey_server.main import create_app
from passkey_server.schema import Credential, PendingAuthentication, PendingRegistration
from passkey_server.services import AuthenticationService, RegistrationService
from passkey_server.sessions import InMemorySessionStore
from passkey_server.users import InMemoryUserStore
from passkey_server.webauthn import (
	AuthenticationOutcome,
	CredentialVerifier,
	IssuedChallenge,
	RegistrationOutcome,
)

RP_ID = "example.com"
ORIGIN = "https://example.com"


class FakeVerifier(CredentialVerifier):
	"""Accepts responses that echo the issued challenge and origin.

	Applies the same counter rule as real authenticators: a counter
	that does not advance is a replay.
	"""

	def __init__(self, rp_id: str = RP_ID, origin: str = ORIGIN):
		self.rp_id = rp_id
		self.origin = origin

	async def registration_options(self, user_id: str, user_name: str) -> IssuedChallenge:
		challenge = secrets.token_urlsafe(32)
		return IssuedChallenge(
			options={
				"challenge": challenge,
				"rp": {"id": self.rp_id, "name": "Test"},
				"user": {"id": user_id, "name": user_name, "displayName": user_name},
				"pubKeyCredParams": [{"type": "public-key", "alg": -7}],
				"timeout": 60000,
				"attestation": "none",
			},
			challenge=challenge,
		)

	async def verify_registration(
		self,
		response: dict[str, Any],
		expected_challenge: str,
	) -> RegistrationOutcome:
		if response.get("challenge") != expected_challenge:
			return RegistrationOutcome(verified=False, reason="challenge mismatch")
		if response.get("origin") != self.origin:
			return RegistrationOutcome(verified=False, reason="origin mismatch")
		return RegistrationOutcome(
			verified=True,
			credential_id=response["id"],
			public_key=response.get("publicKey", "cHVibGljLWtleQ"),
			counter=response.get("counter", 0),
			device_type="single_device",
			backed_up=False,
		)

	async def authentication_options(self, credential: Credential) -> IssuedChallenge:
		challenge = secrets.token_urlsafe(32)
		return IssuedChallenge(
			options={
				"challenge": challenge,
				"rpId": self.rp_id,
				"allowCredentials": [
					{
						"id": credential.credential_id,
						"type": "public-key",
						"transports": credential.transports,
					}
				],
			},
			challenge=challenge,
		)

	async def verify_authentication(
		self,
		response: dict[str, Any],
		expected_challenge: str,
		credential: Credential,
	) -> AuthenticationOutcome:
		if response.get("challenge") != expected_challenge:
			return AuthenticationOutcome(verified=False, reason="challenge mismatch")
		if response.get("origin") != self.origin:
			return AuthenticationOutcome(verified=False, reason="origin mismatch")
		new_counter = response.get("counter", 0)
		if (new_counter > 0 or credential.counter > 0) and new_counter <= credential.counter:
			return AuthenticationOutcome(verified=False, reason="counter did not advance")
		return AuthenticationOutcome(verified=True, new_counter=new_counter)


def registration_response(
	options: dict[str, Any],
	credential_id: str = "Y3JlZC1hbGljZQ",
	origin: str = ORIGIN,
	transports: list[str] | None = None,
) -> dict[str, Any]:
	return {
		"id": credential_id,
		"rawId": credential_id,
		"type": "public-key",
		"challenge": options["challenge"],
		"origin": origin,
		"counter": 0,
		"response": {"transports": transports or ["internal", "hybrid"]},
	}


def authentication_response(
	options: dict[str, Any],
	counter: int,
	credential_id: str = "Y3JlZC1hbGljZQ",
	origin: str = ORIGIN,
) -> dict[str, Any]:
	return {
		"id": credential_id,
		"rawId": credential_id,
		"type": "public-key",
		"challenge": options["challenge"],
		"origin": origin,
		"counter": counter,
	}


class Clock:
	"""Manually advanced UTC clock."""

	def __init__(self):
		self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

	def __call__(self) -> datetime:
		return self.now

	def advance(self, seconds: float) -> None:
		self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
	return Clock()


@pytest.fixture
def verifier():
	return FakeVerifier()


@pytest.fixture
def users():
	return InMemoryUserStore()


@pytest.fixture
def registration_sessions(clock):
	return InMemorySessionStore(PendingRegistration, clock=clock)


@pytest.fixture
def authentication_sessions(clock):
	return InMemorySessionStore(PendingAuthentication, clock=clock)


@pytest.fixture
def registration(users, registration_sessions, verifier):
	return RegistrationService(users, registration_sessions, verifier)


@pytest.fixture
def authentication(users, authentication_sessions, verifier):
	return AuthenticationService(users, authentication_sessions, verifier)


@pytest.fixture
def session_factory():
	engine = create_db_engine("sqlite:///:memory:")
	init_db(engine)
	yield get_session_factory(engine)
	engine.dispose()


@pytest.fixture
def settings():
	return Settings(rp_id=RP_ID, client_url=ORIGIN, rp_name="Test")


@pytest.fixture
def client(settings, users, verifier, registration_sessions, authentication_sessions):
	app = create_app(
		settings,
		users=users,
		verifier=verifier,
		registration_sessions=registration_sessions,
		authentication_sessions=authentication_sessions,
	)
	with TestClient(app) as client:
		yield client
