"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    # Create tables on startup (no migration tooling for a single table)
    create_tables: bool = True

    # Okta - issuer is the authorization server URL,
    # e.g. https://dev-123456.okta.com/oauth2/default
    okta_issuer: str = ""
    okta_audience: str = "api://default"
    # Checked against the token's `cid` claim; skipped when empty
    okta_client_id: str = ""

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 4444
    log_level: str = "info"

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def okta_jwks_url(self) -> str:
        """Get the Okta JWKS URL for fetching public keys."""
        return f"{self.okta_issuer.rstrip('/')}/v1/keys"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
