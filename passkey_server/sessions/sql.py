# (c) Copyright Datacraft, 2026
"""Pending ceremony storage backed by a SQL database."""
import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from passkey_server.db.orm import CeremonySession

from .store import DEFAULT_TTL, SessionStore, StateT, utcnow
from .tokens import generate_session_id

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
	# SQLite drops tzinfo on the way back
	if value.tzinfo is None:
		return value.replace(tzinfo=timezone.utc)
	return value


class SqlSessionStore(SessionStore[StateT]):
	"""Stores pending ceremonies in the ``ceremony_sessions`` table.

	Several stores may share the table; ``kind`` keeps their ids apart.
	"""

	def __init__(
		self,
		session_factory: sessionmaker[Session],
		payload_type: type[StateT],
		kind: str,
		ttl: int = DEFAULT_TTL,
		clock: Callable[[], datetime] = utcnow,
		purge_interval: int | None = None,
	):
		super().__init__(payload_type, ttl=ttl, clock=clock, purge_interval=purge_interval)
		self.session_factory = session_factory
		self.kind = kind

	def create(self, state: StateT, ttl: int | None = None) -> str:
		self._check_payload(state)
		self._sweep_if_due()

		with self.session_factory.begin() as db:
			session_id = generate_session_id()
			while db.get(CeremonySession, session_id) is not None:
				session_id = generate_session_id()
			db.add(
				CeremonySession(
					session_id=session_id,
					kind=self.kind,
					payload=state.model_dump_json(),
					expires_at=self._expiry(ttl),
				)
			)

		logger.debug(f"Created {self.kind} session")
		return session_id

	def get(self, session_id: str) -> StateT | None:
		with self.session_factory.begin() as db:
			row = db.scalar(
				select(CeremonySession).where(
					CeremonySession.session_id == session_id,
					CeremonySession.kind == self.kind,
				)
			)
			if row is None:
				return None
			if self.clock() >= _aware(row.expires_at):
				db.delete(row)
				logger.debug(f"Evicted expired {self.kind} session")
				return None
			return self.payload_type.model_validate_json(row.payload)

	def consume(self, session_id: str) -> None:
		with self.session_factory.begin() as db:
			db.execute(
				delete(CeremonySession).where(
					CeremonySession.session_id == session_id,
					CeremonySession.kind == self.kind,
				)
			)

	def take(self, session_id: str) -> StateT | None:
		with self.session_factory.begin() as db:
			row = db.scalar(
				select(CeremonySession).where(
					CeremonySession.session_id == session_id,
					CeremonySession.kind == self.kind,
				)
			)
			if row is None:
				return None
			payload, expires_at = row.payload, _aware(row.expires_at)

			# Only the caller whose delete lands owns the session
			result = db.execute(
				delete(CeremonySession).where(
					CeremonySession.session_id == session_id,
					CeremonySession.kind == self.kind,
				)
			)
			if result.rowcount != 1:
				return None

		if self.clock() >= expires_at:
			logger.debug(f"Evicted expired {self.kind} session")
			return None
		return self.payload_type.model_validate_json(payload)

	def purge_expired(self) -> int:
		with self.session_factory.begin() as db:
			result = db.execute(
				delete(CeremonySession).where(
					CeremonySession.kind == self.kind,
					CeremonySession.expires_at <= self.clock(),
				)
			)
			return result.rowcount
