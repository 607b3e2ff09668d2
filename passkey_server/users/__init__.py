# (c) Copyright Datacraft, 2026
"""User storage."""
from .store import UserStore, InMemoryUserStore
from .sql import SqlUserStore

__all__ = ["UserStore", "InMemoryUserStore", "SqlUserStore"]
