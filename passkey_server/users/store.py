# (c) Copyright Datacraft, 2026
"""User store capability and its in-process implementation."""
import logging
import threading
from abc import ABC, abstractmethod

from passkey_server.exceptions import DuplicateUser
from passkey_server.schema import Credential, User

logger = logging.getLogger(__name__)


class UserStore(ABC):
	"""Owns users and their single passkey credential."""

	@abstractmethod
	async def get_by_email(self, email: str) -> User | None:
		...

	@abstractmethod
	async def get_by_id(self, user_id: str) -> User | None:
		...

	@abstractmethod
	async def create_user(
		self,
		user_id: str,
		email: str,
		credential: Credential,
	) -> User:
		"""Persist a newly registered user.

		Raises:
			DuplicateUser: a user with this email already exists
		"""

	@abstractmethod
	async def update_counter(self, user_id: str, counter: int) -> None:
		"""Replace the stored signature counter of the user's credential."""


class InMemoryUserStore(UserStore):
	"""Users kept in process memory."""

	def __init__(self):
		self._users: dict[str, User] = {}
		self._by_email: dict[str, str] = {}
		self._lock = threading.Lock()

	async def get_by_email(self, email: str) -> User | None:
		with self._lock:
			user_id = self._by_email.get(email)
			if user_id is None:
				return None
			return self._users[user_id].model_copy(deep=True)

	async def get_by_id(self, user_id: str) -> User | None:
		with self._lock:
			user = self._users.get(user_id)
			return user.model_copy(deep=True) if user else None

	async def create_user(
		self,
		user_id: str,
		email: str,
		credential: Credential,
	) -> User:
		user = User(id=user_id, email=email, credential=credential)
		with self._lock:
			if email in self._by_email or user_id in self._users:
				raise DuplicateUser()
			self._users[user_id] = user
			self._by_email[email] = user_id
		return user.model_copy(deep=True)

	async def update_counter(self, user_id: str, counter: int) -> None:
		with self._lock:
			user = self._users.get(user_id)
			if user is None:
				raise KeyError(user_id)
			user.credential.counter = counter
