"""Application layer: user directory use cases."""
