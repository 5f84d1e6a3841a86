"""Domain layer: entities and repository ports."""
