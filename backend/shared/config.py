"""
Centralized configuration for the SaaS Kit billing backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., STRIPE_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SaaS Kit Billing API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # Direct Postgres URL, migrations only

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""

    # Public application URL (portal return, checkout redirects)
    app_url: str = ""
    portal_return_path: str = "/billing"

    # Account linking
    account_linking_secret: str = ""
    linking_token_ttl_seconds: int = 600

    @property
    def portal_return_url(self) -> str:
        """Where the Stripe billing portal sends the customer back to."""
        return f"{self.app_url.rstrip('/')}{self.portal_return_path}"

    @property
    def linking_secret(self) -> str:
        """Key used to sign account-linking tokens."""
        return self.account_linking_secret or self.supabase_jwt_secret

    def missing_required(self) -> list[str]:
        """
        List the required settings that are not configured.

        The billing core cannot run without these, so the application
        refuses to start when any are missing.
        """
        required = {
            "STRIPE_SECRET_KEY": self.stripe_secret_key,
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
            "APP_URL": self.app_url,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
