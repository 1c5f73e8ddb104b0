"""HTTP API for the web editor."""

from .app import create_app

__all__ = ['create_app']
