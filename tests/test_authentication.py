# (c) Copyright Datacraft, 2026
import pytest
import pytest_asyncio

from passkey_server.exceptions import (
	CredentialMismatch,
	InvalidInput,
	SessionNotFound,
	UnknownUser,
)
from passkey_server.schema import Credential

from tests.conftest import authentication_response


@pytest_asyncio.fixture
async def alice(users):
	return await users.create_user(
		"u-alice",
		"alice@example.com",
		Credential(
			credential_id="Y3JlZC1hbGljZQ",
			public_key="cGs",
			counter=0,
			transports=["internal"],
		),
	)


@pytest.mark.asyncio
async def test_init_authentication_scopes_to_credential(authentication, authentication_sessions, alice):
	challenge = await authentication.init_authentication("alice@example.com")

	assert challenge.options["allowCredentials"] == [
		{"id": "Y3JlZC1hbGljZQ", "type": "public-key", "transports": ["internal"]}
	]
	pending = authentication_sessions.get(challenge.session_id)
	assert pending.user_id == alice.id
	assert pending.challenge == challenge.options["challenge"]


@pytest.mark.asyncio
async def test_init_authentication_unknown_user(authentication, authentication_sessions):
	with pytest.raises(UnknownUser):
		await authentication.init_authentication("nobody@example.com")
	assert len(authentication_sessions) == 0


@pytest.mark.asyncio
async def test_init_authentication_requires_email(authentication):
	with pytest.raises(InvalidInput):
		await authentication.init_authentication("")


@pytest.mark.asyncio
async def test_successful_authentication_advances_counter(authentication, users, alice):
	challenge = await authentication.init_authentication("alice@example.com")

	result = await authentication.complete_authentication(
		challenge.session_id, authentication_response(challenge.options, counter=5)
	)

	assert result.verified
	assert result.user_id == alice.id
	assert (await users.get_by_id(alice.id)).credential.counter == 5


@pytest.mark.asyncio
async def test_replayed_counter_is_rejected(authentication, users, alice):
	first = await authentication.init_authentication("alice@example.com")
	await authentication.complete_authentication(
		first.session_id, authentication_response(first.options, counter=5)
	)

	for stale in (5, 3):
		challenge = await authentication.init_authentication("alice@example.com")
		result = await authentication.complete_authentication(
			challenge.session_id, authentication_response(challenge.options, counter=stale)
		)
		assert not result.verified
		assert result.error == "Verification failed"

	assert (await users.get_by_id(alice.id)).credential.counter == 5


@pytest.mark.asyncio
async def test_session_completes_only_once(authentication, alice):
	challenge = await authentication.init_authentication("alice@example.com")
	await authentication.complete_authentication(
		challenge.session_id, authentication_response(challenge.options, counter=1)
	)

	with pytest.raises(SessionNotFound) as exc_info:
		await authentication.complete_authentication(
			challenge.session_id, authentication_response(challenge.options, counter=2)
		)
	assert exc_info.value.message == "Authentication info not found"


@pytest.mark.asyncio
async def test_foreign_credential_is_rejected(authentication, users, alice):
	challenge = await authentication.init_authentication("alice@example.com")
	response = authentication_response(challenge.options, counter=1, credential_id="Ym9i")

	with pytest.raises(CredentialMismatch):
		await authentication.complete_authentication(challenge.session_id, response)
	assert (await users.get_by_id(alice.id)).credential.counter == 0


@pytest.mark.asyncio
async def test_expired_session_is_not_found(authentication, clock, alice):
	challenge = await authentication.init_authentication("alice@example.com")
	clock.advance(120)

	with pytest.raises(SessionNotFound):
		await authentication.complete_authentication(
			challenge.session_id, authentication_response(challenge.options, counter=1)
		)


@pytest.mark.asyncio
async def test_registration_session_is_not_an_authentication_session(
	registration, authentication, alice
):
	issued = await registration.init_registration("carol@example.com")

	with pytest.raises(SessionNotFound):
		await authentication.complete_authentication(
			issued.session_id, authentication_response(issued.options, counter=1)
		)


@pytest.mark.asyncio
async def test_wrong_challenge_keeps_counter(authentication, users, alice):
	challenge = await authentication.init_authentication("alice@example.com")

	result = await authentication.complete_authentication(
		challenge.session_id, authentication_response({"challenge": "old"}, counter=9)
	)

	assert not result.verified
	assert (await users.get_by_id(alice.id)).credential.counter == 0
