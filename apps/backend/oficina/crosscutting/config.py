"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the console's current behavior

Collaborators:
  - api/main.py: reads settings for CORS and startup validation
  - container.py: reads settings for data store and activity log wiring
  - identity/tokens.py: session secret, TTL and cookie names

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic - pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        session_secret: Secret for signing session tokens (HS256)
        session_ttl_hours: Session lifetime in hours (default: 8)
        session_cookie_name: Cookie holding the identity token
        role_cookie_name: Cookie holding the role marker
        session_cookie_secure: Set Secure on session cookies
        guard_distinct_forbidden: Answer 403 (instead of redirect) on wrong role
        activity_log_max_entries: Cap for the activity log (default: 1000)
        data_store_path: JSON file standing in for local storage ("" = memory)
        log_level: Logging level
        log_json: Emit JSON logs
    """

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True

    # Security - Session tokens
    session_secret: str = "dev-secret"
    session_ttl_hours: float = 8.0
    session_cookie_name: str = "auth_token"
    role_cookie_name: str = "user_role"
    session_cookie_secure: bool = False

    # Route guard
    guard_distinct_forbidden: bool = False

    # Activity log
    activity_log_max_entries: int = 1000

    # Mock data store
    data_store_path: str = ""

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("session_ttl_hours")
    @classmethod
    def session_ttl_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("session_ttl_hours must be greater than 0")
        return v

    @field_validator("activity_log_max_entries")
    @classmethod
    def activity_log_cap_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("activity_log_max_entries must be greater than 0")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        secret = (self.session_secret or "").strip()
        if not secret or secret in insecure_secrets:
            raise ValueError(
                "SESSION_SECRET must be set to a strong, non-default value in production"
            )
        if len(secret) < 32:
            raise ValueError("SESSION_SECRET must be at least 32 characters in production")
        if not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SECURE must be true in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

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
        ValidationError: If env vars are invalid
    """
    return Settings()
