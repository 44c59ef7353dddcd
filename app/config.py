"""Configuration management using Pydantic settings.

Environment variables are loaded by ``Environment`` (upper-case names, optional
``.env`` file) and converted into the lower-case ``Settings`` model that the
rest of the application consumes. Tests construct ``Settings`` directly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (parent of app/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Default secret key that must be changed in production
_DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


class ConfigurationError(Exception):
    """Raised when application configuration is invalid."""

    pass


class Environment(BaseSettings):
    """Raw environment variable loading."""

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Flask settings
    SECRET_KEY: str = Field(default=_DEFAULT_SECRET_KEY)
    FLASK_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # CORS settings
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # Managed backend (PostgREST interface) settings
    SUPABASE_URL: str | None = Field(
        default=None,
        description="Base URL of the managed backend (e.g., https://xyz.supabase.co)"
    )
    SUPABASE_ANON_KEY: str | None = Field(
        default=None,
        description="API key sent in the apikey header"
    )
    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Bearer token for writes (falls back to the anon key)"
    )
    BACKEND_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for backend HTTP requests"
    )
    BACKEND_PAGE_SIZE: int = Field(
        default=1000,
        description="Rows requested per page (must not exceed the backend row cap)"
    )

    # Dashboard settings
    CONFIG_CACHE_TTL_SECONDS: int = Field(
        default=30,
        description="Lifetime of the cached configuration list"
    )
    RECENT_READINGS_LIMIT: int = Field(
        default=10,
        description="Number of fleet-wide readings shown on the overview"
    )


class Settings(BaseModel):
    """Application settings."""

    model_config = ConfigDict(from_attributes=True)

    # Flask settings
    secret_key: str = _DEFAULT_SECRET_KEY
    flask_env: str = "development"
    debug: bool = True

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]

    # Managed backend
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_key: str | None = None
    backend_timeout_seconds: float = 10.0
    backend_page_size: int = 1000

    # Dashboard
    config_cache_ttl_seconds: int = 30
    recent_readings_limit: int = 10

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.flask_env == "production" or not self.debug

    @property
    def is_testing(self) -> bool:
        """Check if the application is running in testing mode."""
        return self.flask_env == "testing"

    @property
    def backend_rest_url(self) -> str | None:
        """REST root of the managed backend, or None when not configured."""
        if not self.supabase_url:
            return None
        return f"{self.supabase_url}/rest/v1"

    @property
    def backend_bearer_token(self) -> str | None:
        """Token sent in the Authorization header."""
        return self.supabase_service_key or self.supabase_anon_key

    @classmethod
    def load(cls, env: "Environment | None" = None) -> "Settings":
        """Load settings from environment variables."""
        if env is None:
            env = Environment()

        def strip_slashes(url: str | None) -> str | None:
            return url.rstrip("/") if url else url

        return cls(
            secret_key=env.SECRET_KEY,
            flask_env=env.FLASK_ENV,
            debug=env.DEBUG,
            cors_origins=env.CORS_ORIGINS,
            supabase_url=strip_slashes(env.SUPABASE_URL),
            supabase_anon_key=env.SUPABASE_ANON_KEY,
            supabase_service_key=env.SUPABASE_SERVICE_KEY,
            backend_timeout_seconds=env.BACKEND_TIMEOUT_SECONDS,
            backend_page_size=env.BACKEND_PAGE_SIZE,
            config_cache_ttl_seconds=env.CONFIG_CACHE_TTL_SECONDS,
            recent_readings_limit=env.RECENT_READINGS_LIMIT,
        )

    def validate_production_config(self) -> None:
        """Validate that required configuration is set for production.

        Raises:
            ConfigurationError: If required settings are missing or insecure
        """
        errors: list[str] = []

        if self.is_production and self.secret_key == _DEFAULT_SECRET_KEY:
            errors.append(
                "SECRET_KEY must be set to a secure value in production "
                "(current value is the insecure default)"
            )

        if self.is_production and not self.supabase_url:
            errors.append("SUPABASE_URL must be set in production")

        if self.is_production and not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY must be set in production")

        if self.backend_page_size < 1:
            errors.append("BACKEND_PAGE_SIZE must be at least 1")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            )

    def to_flask_config(self) -> dict[str, object]:
        """Subset of settings exposed through ``app.config``."""
        return {
            "SECRET_KEY": self.secret_key,
            "DEBUG": self.debug,
            "TESTING": self.is_testing,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.load()
