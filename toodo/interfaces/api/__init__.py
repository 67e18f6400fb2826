"""API interface for toodo.

This module exports the FastAPI router and app factory.
"""

from toodo.interfaces.api.app import create_app
from toodo.interfaces.api.routes import router

__all__ = ["router", "create_app"]
