"""HTTP DTOs (pydantic)."""
