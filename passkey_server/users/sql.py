# (c) Copyright Datacraft, 2026
"""User store backed by SQLAlchemy."""
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from passkey_server.db import orm
from passkey_server.exceptions import DuplicateUser
from passkey_server.schema import Credential, User

from .store import UserStore

logger = logging.getLogger(__name__)


def _to_schema(row: orm.User) -> User:
	return User(
		id=row.id,
		email=row.email,
		credential=Credential.model_validate(row.credential),
	)


class SqlUserStore(UserStore):

	def __init__(self, session_factory: sessionmaker[Session]):
		self.session_factory = session_factory

	async def get_by_email(self, email: str) -> User | None:
		with self.session_factory() as db:
			row = db.scalar(select(orm.User).where(orm.User.email == email))
			return _to_schema(row) if row else None

	async def get_by_id(self, user_id: str) -> User | None:
		with self.session_factory() as db:
			row = db.get(orm.User, user_id)
			return _to_schema(row) if row else None

	async def create_user(
		self,
		user_id: str,
		email: str,
		credential: Credential,
	) -> User:
		with self.session_factory() as db:
			row = orm.User(
				id=user_id,
				email=email,
				credential=orm.PasskeyCredential(
					credential_id=credential.credential_id,
					public_key=credential.public_key,
					counter=credential.counter,
					device_type=credential.device_type,
					backed_up=credential.backed_up,
					transports=list(credential.transports),
				),
			)
			db.add(row)
			try:
				db.commit()
			except IntegrityError:
				db.rollback()
				raise DuplicateUser()
			db.refresh(row)
			return _to_schema(row)

	async def update_counter(self, user_id: str, counter: int) -> None:
		with self.session_factory() as db:
			result = db.execute(
				update(orm.PasskeyCredential)
				.where(orm.PasskeyCredential.user_id == user_id)
				.values(counter=counter)
			)
			if result.rowcount != 1:
				db.rollback()
				raise KeyError(user_id)
			db.commit()
