"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Credential store connection settings.

    The service only reads the ``Session`` table maintained by the app's
    install flow; it never writes to this database.

    Environment variables:
        GIFTCARD_DB_HOST: Database host (default: localhost)
        GIFTCARD_DB_PORT: Database port (default: 5432)
        GIFTCARD_DB_DATABASE: Database name (default: giftcard)
        GIFTCARD_DB_USERNAME: Database user (default: giftcard)
        GIFTCARD_DB_PASSWORD: Database password (required in production)
        GIFTCARD_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 1)
        GIFTCARD_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="GIFTCARD_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="giftcard", description="Database name")
    username: str = Field(default="giftcard", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=1,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=5,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthoritySettings(BaseSettings):
    """Settings for the Admin GraphQL API that holds gift card balances.

    Environment variables:
        GIFTCARD_AUTHORITY_API_VERSION: Admin API version (default: 2025-01)
        GIFTCARD_AUTHORITY_ENDPOINT_TEMPLATE: GraphQL endpoint, formatted with
            ``shop`` and ``version``
        GIFTCARD_AUTHORITY_TIMEOUT_SECONDS: Per-request timeout (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="GIFTCARD_AUTHORITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_version: str = Field(default="2025-01", description="Admin API version")
    endpoint_template: str = Field(
        default="https://{shop}/admin/api/{version}/graphql.json",
        description="GraphQL endpoint template",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single GraphQL request",
        gt=0,
        le=120,
    )

    def endpoint_for(self, shop: str) -> str:
        """Build the GraphQL endpoint URL for a shop."""
        return self.endpoint_template.format(shop=shop, version=self.api_version)


class RedemptionSettings(BaseSettings):
    """Bounds for gift card candidate searches.

    Environment variables:
        GIFTCARD_REDEMPTION_LOOKUP_CANDIDATE_LIMIT: Page size for balance
            lookups (default: 10)
        GIFTCARD_REDEMPTION_CONVERT_CANDIDATE_LIMIT: Page size when converting
            a card to a discount (default: 20)
    """

    model_config = SettingsConfigDict(
        env_prefix="GIFTCARD_REDEMPTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lookup_candidate_limit: int = Field(
        default=10,
        description="Maximum candidates fetched for a balance lookup",
        ge=1,
        le=250,
    )
    convert_candidate_limit: int = Field(
        default=20,
        description="Maximum candidates fetched when converting to a discount",
        ge=1,
        le=250,
    )


class AppProxySettings(BaseSettings):
    """Storefront app proxy settings.

    Environment variables:
        GIFTCARD_PROXY_APP_SECRET: Shared secret used to verify the app proxy
            signature. When empty, only the ``shop`` query parameter is used.
    """

    model_config = SettingsConfigDict(
        env_prefix="GIFTCARD_PROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_secret: SecretStr = Field(
        default=SecretStr(""),
        description="App secret used to verify proxy request signatures",
    )

    @property
    def signature_verification_enabled(self) -> bool:
        """Whether an app secret is configured."""
        return bool(self.app_secret.get_secret_value())


class CORSSettings(BaseSettings):
    """CORS settings for the storefront widget.

    Environment variables:
        GIFTCARD_CORS_ORIGINS: JSON list of allowed origins (default: ["*"])
    """

    model_config = SettingsConfigDict(
        env_prefix="GIFTCARD_CORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Gift Card Proxy", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_authority_settings() -> AuthoritySettings:
    """Get cached authority settings."""
    return AuthoritySettings()


@lru_cache
def get_redemption_settings() -> RedemptionSettings:
    """Get cached redemption settings."""
    return RedemptionSettings()


@lru_cache
def get_app_proxy_settings() -> AppProxySettings:
    """Get cached app proxy settings."""
    return AppProxySettings()


@lru_cache
def get_cors_settings() -> CORSSettings:
    """Get cached CORS settings."""
    return CORSSettings()
