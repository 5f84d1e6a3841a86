"""PostgreSQL-backed stores."""
