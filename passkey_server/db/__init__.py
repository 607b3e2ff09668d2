# (c) Copyright Datacraft, 2026
"""Database module for passkey-server."""
from .orm import User, PasskeyCredential, CeremonySession
from .base import Base
from .engine import create_db_engine, get_session_factory, init_db

__all__ = [
	'Base',
	'User',
	'PasskeyCredential',
	'CeremonySession',
	'create_db_engine',
	'get_session_factory',
	'init_db',
]
