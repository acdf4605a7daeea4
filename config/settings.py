"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./workload.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_echo: bool = False

    # OpenID Connect / Azure AD
    openid_config_url: str = ""
    valid_audience: str = ""
    valid_issuer: str = ""
    client_id: str | None = None
    tenant_id: str | None = None

    # Timezone used for "now" / "today" in worklogs and schedules
    timezone: str = "Asia/Kolkata"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite (local runs and tests)."""
        return self.database_url.startswith("sqlite")


settings = Settings()
