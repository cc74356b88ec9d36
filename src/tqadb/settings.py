from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TQADB_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    database_url: str = "sqlite:///./tqadb.db"
    echo_sql: bool = False

    # Isolation level for read-only transactions (e.g. "REPEATABLE READ").
    # Leave unset to use the engine default.
    read_isolation_level: str | None = None

    log_level: str = "INFO"
    log_json: bool = False


def get_settings() -> Settings:
    return Settings()
