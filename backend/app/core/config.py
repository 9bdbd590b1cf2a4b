"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "PopWork Backend"
    debug: bool = False
    log_level: str = "INFO"
    # "sql" reads the Postgres schema directly, "supabase" goes through PostgREST.
    store_backend: str = "sql"
    database_url: str = "postgresql+psycopg2://postgres@localhost:5432/popwork"
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str | None = None
    supabase_timeout_seconds: float = 10.0
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "popwork"
    opik_workspace: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
