# (c) Copyright Datacraft, 2026
"""API routers."""
from .ceremony import router as ceremony_router

__all__ = ["ceremony_router"]
