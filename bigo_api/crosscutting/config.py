"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for local development

Collaborators:
  - api/main.py: reads settings for CORS, pool sizing and startup validation
  - container.py: decides which user store implementation to wire
  - identity/tokens.py: issuer/audience/JWKS for token verification
  - crosscutting/logger.py: log level and format

Constraints:
  - Lives in the infrastructure edge, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Singleton via lru_cache
  - Env var names are the upper-cased field names (DATABASE_URL, CLERK_AUTHORITY, ...)
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        db_pool_min_size: Minimum pooled connections (default: 2)
        db_pool_max_size: Maximum pooled connections (default: 10)
        db_statement_timeout_ms: Per-connection statement timeout (default: 30s)
        clerk_authority: Token issuer; JWKS is served under it
        clerk_audience: Expected audience (empty disables the audience check)
        clerk_jwks_url: Explicit JWKS URL (default: derived from the authority)
        jwt_clock_skew_seconds: Leeway applied to exp/nbf/iat (default: 30)
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: True)
        log_level: Root log level for the service logger
        log_json: Emit JSON log lines (default: True)
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000

    # Identity provider (Clerk)
    clerk_authority: str = ""
    clerk_audience: str = ""
    clerk_jwks_url: str = ""
    jwt_clock_skew_seconds: int = 30

    # CORS configuration (Vite dev servers by default)
    allowed_origins: str = "http://localhost:5173,http://localhost:5174"
    cors_allow_credentials: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("db_pool_min_size", "db_pool_max_size")
    @classmethod
    def pool_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("pool sizes must be greater than 0")
        return v

    @field_validator("jwt_clock_skew_seconds")
    @classmethod
    def clock_skew_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("jwt_clock_skew_seconds must be >= 0")
        return v

    @field_validator("clerk_authority")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    @model_validator(mode="after")
    def validate_pool_bounds(self):
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        if not self.clerk_authority:
            raise ValueError(
                "CLERK_AUTHORITY must be set in production "
                "(the issuer of the identity tokens)"
            )
        if not self.clerk_authority.startswith("https://"):
            raise ValueError("CLERK_AUTHORITY must use https in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_jwks_url(self) -> str:
        """JWKS endpoint: explicit override, else `{authority}/.well-known/jwks.json`."""
        if self.clerk_jwks_url.strip():
            return self.clerk_jwks_url.strip()
        return f"{self.clerk_authority}/.well-known/jwks.json"

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
