"""
HTTP layer - FastAPI application exposing the availability and quote endpoints.
"""

from .app import create_app

__all__ = ["create_app"]
