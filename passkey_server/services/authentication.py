# (c) Copyright Datacraft, 2026
"""Authentication ceremony: issue a challenge, verify it, advance the counter."""
import logging
from typing import Any

from passkey_server.exceptions import (
	CredentialMismatch,
	InvalidInput,
	SessionNotFound,
	UnknownUser,
	VerificationFailed,
)
from passkey_server.schema import PendingAuthentication
from passkey_server.sessions import SessionStore
from passkey_server.users import UserStore
from passkey_server.webauthn import CredentialVerifier

from .results import CeremonyResult, ChallengeResponse

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Authentication info not found"


class AuthenticationService:

	def __init__(
		self,
		users: UserStore,
		sessions: SessionStore[PendingAuthentication],
		verifier: CredentialVerifier,
	):
		self.users = users
		self.sessions = sessions
		self.verifier = verifier

	async def init_authentication(self, email: str | None) -> ChallengeResponse:
		"""Issue authentication options scoped to the user's passkey.

		Raises:
			InvalidInput: no email given
			UnknownUser: nobody is registered under the email
		"""
		if not email:
			raise InvalidInput()

		user = await self.users.get_by_email(email)
		if user is None:
			raise UnknownUser()

		issued = await self.verifier.authentication_options(user.credential)

		session_id = self.sessions.create(
			PendingAuthentication(user_id=user.id, challenge=issued.challenge)
		)
		return ChallengeResponse(options=issued.options, session_id=session_id)

	async def complete_authentication(
		self,
		session_id: str | None,
		response: dict[str, Any],
	) -> CeremonyResult:
		"""Verify an assertion and store the authenticator's new counter.

		Raises:
			SessionNotFound: unknown, used or expired session
			CredentialMismatch: the response is for another credential
		"""
		pending = self.sessions.take(session_id) if session_id else None
		if pending is None:
			raise SessionNotFound(SESSION_NOT_FOUND)

		user = await self.users.get_by_id(pending.user_id)
		if user is None or user.credential.credential_id != response.get("id"):
			raise CredentialMismatch()

		outcome = await self.verifier.verify_authentication(
			response,
			expected_challenge=pending.challenge,
			credential=user.credential,
		)
		if not outcome.verified:
			logger.warning(f"Authentication rejected for user {user.id}: {outcome.reason}")
			return CeremonyResult(
				verified=False,
				error=VerificationFailed.default_message,
				user_id=user.id,
			)

		# The verifier already refused counters that did not advance
		await self.users.update_counter(user.id, outcome.new_counter)

		logger.info(f"Passkey authentication successful for user {user.id}")
		return CeremonyResult(verified=True, user_id=user.id)
