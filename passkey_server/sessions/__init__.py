# (c) Copyright Datacraft, 2026
"""Challenge session storage."""

from .store import DEFAULT_TTL, SessionStore, InMemorySessionStore
from .sql import SqlSessionStore
from .tokens import generate_session_id

__all__ = [
	"DEFAULT_TTL",
	"SessionStore",
	"InMemorySessionStore",
	"SqlSessionStore",
	"generate_session_id",
]
