"""
ASGI entry point.

Run with: uvicorn bigo_api.main:app
"""

from .api.main import app

__all__ = ["app"]
