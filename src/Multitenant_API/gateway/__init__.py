"""HTTP gateway of the multi-tenant resource API."""

from .app import create_app

__all__ = ["create_app"]
