# (c) Copyright Datacraft, 2026
"""Passkey ceremony server."""

__version__ = "0.1.0"
