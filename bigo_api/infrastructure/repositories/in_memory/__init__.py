"""In-memory stores (tests / local dev)."""
