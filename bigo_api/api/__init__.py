"""ASGI application assembly."""
