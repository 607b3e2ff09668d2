# (c) Copyright Datacraft, 2026
"""Registration ceremony: issue a challenge, verify it, persist the user."""
import logging
import uuid
from typing import Any

from passkey_server.exceptions import (
	DuplicateUser,
	InvalidInput,
	SessionNotFound,
	VerificationFailed,
)
from passkey_server.schema import Credential, PendingRegistration
from passkey_server.sessions import SessionStore
from passkey_server.users import UserStore
from passkey_server.webauthn import CredentialVerifier

from .results import CeremonyResult, ChallengeResponse

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Registration info not found"


def client_transports(response: dict[str, Any]) -> list[str]:
	"""Transports reported by the browser for a new credential."""
	transports = response.get("transports")
	if transports is None:
		transports = (response.get("response") or {}).get("transports")
	if not isinstance(transports, list):
		return []
	return [t for t in transports if isinstance(t, str)]


class RegistrationService:

	def __init__(
		self,
		users: UserStore,
		sessions: SessionStore[PendingRegistration],
		verifier: CredentialVerifier,
	):
		self.users = users
		self.sessions = sessions
		self.verifier = verifier

	async def init_registration(self, email: str | None) -> ChallengeResponse:
		"""Issue registration options for a new account.

		Raises:
			InvalidInput: no email given
			DuplicateUser: the email is already registered
		"""
		if not email:
			raise InvalidInput()

		if await self.users.get_by_email(email) is not None:
			raise DuplicateUser()

		user_id = str(uuid.uuid4())
		issued = await self.verifier.registration_options(user_id, email)

		session_id = self.sessions.create(
			PendingRegistration(
				user_id=user_id,
				email=email,
				challenge=issued.challenge,
			)
		)
		return ChallengeResponse(options=issued.options, session_id=session_id)

	async def complete_registration(
		self,
		session_id: str | None,
		response: dict[str, Any],
	) -> CeremonyResult:
		"""Verify the authenticator's attestation and create the user.

		The pending session is consumed before verification, so every
		session id completes at most once whatever the outcome.

		Raises:
			SessionNotFound: unknown, used or expired session
		"""
		pending = self.sessions.take(session_id) if session_id else None
		if pending is None:
			raise SessionNotFound(SESSION_NOT_FOUND)

		outcome = await self.verifier.verify_registration(
			response,
			expected_challenge=pending.challenge,
		)
		if not outcome.verified:
			logger.warning(f"Registration rejected: {outcome.reason}")
			return CeremonyResult(
				verified=False,
				error=VerificationFailed.default_message,
			)

		user = await self.users.create_user(
			pending.user_id,
			pending.email,
			Credential(
				credential_id=outcome.credential_id,
				public_key=outcome.public_key,
				counter=outcome.counter,
				device_type=outcome.device_type,
				backed_up=outcome.backed_up,
				transports=client_transports(response),
			),
		)

		logger.info(f"Passkey registered for user {user.id}")
		return CeremonyResult(verified=True, user_id=user.id)
