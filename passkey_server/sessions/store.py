# (c) Copyright Datacraft, 2026
"""Short-lived storage for pending ceremony state."""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel

from .tokens import generate_session_id

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60  # seconds

StateT = TypeVar("StateT", bound=BaseModel)


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


class SessionStore(ABC, Generic[StateT]):
	"""Keyed, expiring storage for one kind of pending ceremony.

	A store only accepts payloads of the type it was created for, so a
	registration session id can never resolve in an authentication store.
	Expired entries behave exactly like missing ones.
	"""

	def __init__(
		self,
		payload_type: type[StateT],
		ttl: int = DEFAULT_TTL,
		clock: Callable[[], datetime] = utcnow,
		purge_interval: int | None = None,
	):
		self.payload_type = payload_type
		self.ttl = ttl
		self.clock = clock
		self.purge_interval = ttl if purge_interval is None else purge_interval
		self._next_purge: datetime | None = None

	def _check_payload(self, state: StateT) -> None:
		if not isinstance(state, self.payload_type):
			raise TypeError(
				f"{type(self).__name__} holds {self.payload_type.__name__}, "
				f"got {type(state).__name__}"
			)

	def _expiry(self, ttl: int | None) -> datetime:
		return self.clock() + timedelta(seconds=self.ttl if ttl is None else ttl)

	def _sweep_if_due(self) -> None:
		"""Run purge_expired at most once per purge interval."""
		now = self.clock()
		if self._next_purge is not None and now < self._next_purge:
			return
		self._next_purge = now + timedelta(seconds=self.purge_interval)
		self.purge_expired()

	@abstractmethod
	def create(self, state: StateT, ttl: int | None = None) -> str:
		"""Store state under a fresh session id and return the id."""

	@abstractmethod
	def get(self, session_id: str) -> StateT | None:
		"""Return live state, evicting it if it has expired."""

	@abstractmethod
	def consume(self, session_id: str) -> None:
		"""Delete the entry; a no-op if it is already gone."""

	@abstractmethod
	def take(self, session_id: str) -> StateT | None:
		"""Atomically return live state and delete it.

		Of several concurrent callers with the same id, at most one
		receives the state.
		"""

	@abstractmethod
	def purge_expired(self) -> int:
		"""Drop every expired entry, returning how many were removed."""


@dataclass
class _Entry(Generic[StateT]):
	state: StateT
	expires_at: datetime


class InMemorySessionStore(SessionStore[StateT]):
	"""Process-local store guarded by a single lock."""

	def __init__(
		self,
		payload_type: type[StateT],
		ttl: int = DEFAULT_TTL,
		clock: Callable[[], datetime] = utcnow,
		purge_interval: int | None = None,
	):
		super().__init__(payload_type, ttl=ttl, clock=clock, purge_interval=purge_interval)
		self._entries: dict[str, _Entry[StateT]] = {}
		self._lock = threading.Lock()

	def __len__(self) -> int:
		with self._lock:
			return len(self._entries)

	def create(self, state: StateT, ttl: int | None = None) -> str:
		self._check_payload(state)
		self._sweep_if_due()
		entry = _Entry(state=state, expires_at=self._expiry(ttl))

		with self._lock:
			session_id = generate_session_id()
			while session_id in self._entries:
				session_id = generate_session_id()
			self._entries[session_id] = entry

		logger.debug(f"Created {self.payload_type.__name__} session")
		return session_id

	def get(self, session_id: str) -> StateT | None:
		with self._lock:
			entry = self._entries.get(session_id)
			if entry is None:
				return None
			if self.clock() >= entry.expires_at:
				del self._entries[session_id]
				logger.debug(f"Evicted expired {self.payload_type.__name__} session")
				return None
			return entry.state

	def consume(self, session_id: str) -> None:
		with self._lock:
			self._entries.pop(session_id, None)

	def take(self, session_id: str) -> StateT | None:
		with self._lock:
			entry = self._entries.pop(session_id, None)
		if entry is None:
			return None
		if self.clock() >= entry.expires_at:
			logger.debug(f"Evicted expired {self.payload_type.__name__} session")
			return None
		return entry.state

	def purge_expired(self) -> int:
		now = self.clock()
		with self._lock:
			expired = [
				key for key, entry in self._entries.items()
				if now >= entry.expires_at
			]
			for key in expired:
				del self._entries[key]
		return len(expired)
