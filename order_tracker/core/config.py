"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from order_tracker.core.exceptions import ConfigurationError


class ShopifyConfig(BaseModel):
    """Resolved Shopify Admin API credentials, built once at startup."""

    model_config = ConfigDict(frozen=True)

    domain: str
    access_token: SecretStr
    api_version: str
    timeout: float = 5.0

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}/admin/api/{self.api_version}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # API
    api_prefix: str = "/api"
    project_name: str = "Order Tracker"
    version: str = "0.1.0"

    # Shopify
    shopify_domain: str = ""
    shopify_access_token: SecretStr = SecretStr("")
    shopify_api_version: str = "2024-10"
    shopify_timeout: float = Field(default=5.0, gt=0)

    # CORS
    cors_origins: list[str] = []
    cors_origin_regex: str = r"https://([a-z0-9-]+\.)*(myshopify\.com|vercel\.app)"

    # Rate limiting
    search_rate_limit: str = "10/minute"

    # Optional endpoints
    enable_diagnostics: bool = False
    enable_status_updates: bool = False

    # Error reporting
    sentry_dsn: str = ""

    @field_validator("shopify_domain", "shopify_api_version", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("shopify_access_token", mode="before")
    @classmethod
    def _strip_token(cls, value: object) -> object:
        if isinstance(value, SecretStr):
            return SecretStr(value.get_secret_value().strip())
        return value.strip() if isinstance(value, str) else value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def shopify_configured(self) -> bool:
        """Whether both the store domain and access token are present."""
        return bool(self.shopify_domain and self.shopify_access_token.get_secret_value())

    @computed_field  # type: ignore[prop-decorator]
    @property
    def allowed_origins(self) -> list[str]:
        """Explicit CORS origins, including the store's own domain."""
        origins = list(self.cors_origins)
        if self.shopify_domain:
            store_origin = f"https://{self.shopify_domain}"
            if store_origin not in origins:
                origins.append(store_origin)
        return origins

    def shopify_config(self) -> ShopifyConfig:
        """Build the Shopify config value object.

        Raises:
            ConfigurationError: If the store domain, access token or API
                version is missing.
        """
        missing = [
            name
            for name, value in (
                ("SHOPIFY_DOMAIN", self.shopify_domain),
                ("SHOPIFY_ACCESS_TOKEN", self.shopify_access_token.get_secret_value()),
                ("SHOPIFY_API_VERSION", self.shopify_api_version),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing Shopify settings: {', '.join(missing)}")

        return ShopifyConfig(
            domain=self.shopify_domain,
            access_token=self.shopify_access_token,
            api_version=self.shopify_api_version,
            timeout=self.shopify_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
