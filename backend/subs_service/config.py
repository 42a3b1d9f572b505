"""Application configuration using pydantic-settings."""

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = "Subscription Service"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Server (APP_PORT is what the container deployment sets)
    host: str = "0.0.0.0"
    port: int = Field(default=8000, validation_alias=AliasChoices("port", "app_port"))

    # Database (PostgreSQL). DATABASE_URL wins; otherwise the URL is
    # assembled from the discrete DB_* variables.
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "subscriptions"
    db_sslmode: str = "disable"

    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_command_timeout: float = 30.0  # seconds, per statement

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    @model_validator(mode="after")
    def _assemble_database_url(self) -> "Settings":
        """Build database_url from the DB_* parts when it is not given directly."""
        if not self.database_url:
            url = (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
            if self.db_sslmode and self.db_sslmode != "disable":
                url += f"?ssl={self.db_sslmode}"
            self.database_url = url
        return self

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


settings = Settings()
