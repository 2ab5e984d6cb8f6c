"""Penalties domain API package."""

from penalties.api.routes import penalty_router

__all__ = ["penalty_router"]
