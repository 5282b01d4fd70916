"""Flask JSON API for playing against the computer opponent."""

from .app import create_app

__all__ = ["create_app"]
