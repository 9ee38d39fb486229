"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings exposed via dependency injection throughout the app."""

    # Read .env with BOM tolerance; case-sensitive keys
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Heatmap Center API"
    ENV: str = "dev"  # dev | staging | prod
    DEBUG: bool = False

    # Session token (signed JWT in an http-only cookie)
    SECRET_KEY: str  # set via env/.env
    SESSION_EXPIRE_MINUTES: int = 8 * 60
    SESSION_COOKIE_NAME: str = "heatmap_session"
    JWT_ISSUER: str = "heatmap-api"

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = Field(default_factory=list)

    # Cookies
    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"  # lax/strict/none

    # Snowflake warehouse
    SNOWFLAKE_ACCOUNT: str | None = None
    SNOWFLAKE_USER: str | None = None
    SNOWFLAKE_PASSWORD: str | None = None
    # Key-pair auth takes precedence over the password when set.
    SNOWFLAKE_PRIVATE_KEY_PATH: str | None = None
    SNOWFLAKE_ROLE: str | None = None
    SNOWFLAKE_WAREHOUSE: str = "COMPUTE_WH"
    SNOWFLAKE_DATABASE: str = "REPRALLY"
    SNOWFLAKE_SCHEMA: str = "ANALYTICS"
    # Skip the warehouse entirely and serve synthetic data.
    MOCK_DATA_ONLY: bool = False
    WAREHOUSE_QUERY_TIMEOUT_SEC: float = 30.0
    # The connector shares one connection handle; keep this at 1 unless the
    # driver is known to multiplex safely.
    WAREHOUSE_MAX_CONCURRENCY: int = 1

    # File cache and refresh schedule
    DATA_CACHE_DIR: Path = Path("data_cache")
    # 0 disables the staleness check; entries then live until overwritten.
    CACHE_MAX_AGE_SEC: int = 0
    REFRESH_INTERVAL_SEC: int = 3600
    # How many top regions get their sub-region cache pre-warmed per cycle.
    REFRESH_FANOUT_LIMIT: int = 5

    # Credential store
    USERS_FILE: Path = Path("db/users.json")
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "password"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    SECURITY_MAX_CONCURRENCY: int = 4
    LOGIN_RATE: str = "10/minute"

    STATIC_DIR: Path = Path("public")
    # None means "expose outside prod".
    EXPOSE_ERROR_DETAILS: bool | None = None

    @property
    def expose_error_details(self) -> bool:
        if self.EXPOSE_ERROR_DETAILS is not None:
            return self.EXPOSE_ERROR_DETAILS
        return self.ENV != "prod"

    @property
    def warehouse_configured(self) -> bool:
        """True when enough credentials exist to attempt a connection."""

        if self.MOCK_DATA_ONLY:
            return False
        has_auth = bool(self.SNOWFLAKE_PASSWORD or self.SNOWFLAKE_PRIVATE_KEY_PATH)
        return bool(self.SNOWFLAKE_ACCOUNT and self.SNOWFLAKE_USER and has_auth)


settings = Settings()
