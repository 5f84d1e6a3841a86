"""Infrastructure layer: database pool and user store implementations."""
