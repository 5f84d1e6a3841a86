"""Feature routers (users, health)."""
