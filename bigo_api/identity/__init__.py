"""Identity: token verification, claims and access dependencies."""
