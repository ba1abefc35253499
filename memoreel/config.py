from pathlib import Path
from urllib.parse import quote

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """
    Application settings.

    Built once at startup by load_settings() and passed explicitly to the
    components that need it. Nothing reads settings from a module global.
    """

    # Environment settings
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = True

    # HTTP server
    PORT: int = 8080

    # =================================================================
    # DATABASE SETTINGS
    # =================================================================
    DATABASE_URL: str | None = None
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_DATABASE: str = "memoreel"
    DB_SSL_MODE: str = "disable"

    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_MAX_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0  # 10 minutes
    DB_POOL_MAX_LIFETIME: float = 3600.0  # 1 hour
    DB_STATEMENT_TIMEOUT: str = "30s"

    # =================================================================
    # AUTH SETTINGS
    # =================================================================
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str | None = None

    # Reel listing
    DEFAULT_PER_PAGE: int = 20
    MAX_PER_PAGE: int = 100

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def build_dsn(self) -> str:
        """Connection string for psycopg; DATABASE_URL wins when set."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        auth = f"{quote(self.DB_USERNAME, safe='')}:{quote(self.DB_PASSWORD, safe='')}"
        address = f"{self.DB_HOST}:{self.DB_PORT}"
        return f"postgresql://{auth}@{address}/{self.DB_DATABASE}?sslmode={self.DB_SSL_MODE}"

    def get_db_pool_config(self) -> dict:
        """
        Get database pool configuration.
        Adjust environment-specific settings based on self.environment.
        """
        config = {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": self.DB_POOL_MAX_SIZE,
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }

        if self.environment in ("development", "test"):
            config.update(
                {
                    "min_size": min(self.DB_POOL_MIN_SIZE, 2),
                    "max_size": min(self.DB_POOL_MAX_SIZE, 5),
                    "timeout": min(self.DB_POOL_TIMEOUT, 15.0),
                }
            )

        return config


def load_settings(env_prefix: str = "") -> Settings:
    """
    Build the settings object.

    Args:
        env_prefix: Prefix for every environment variable. "TEST_" reads the
            test configuration (TEST_DB_HOST, TEST_DATABASE_URL, ...).
    """
    return Settings(_env_prefix=env_prefix)
