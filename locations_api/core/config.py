# locations_api/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Host Locations API", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database (Supabase Postgres)
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    locations_table: str = Field(default="locations", alias="LOCATIONS_TABLE")
    db_pool_max_size: int = Field(default=10, alias="DB_POOL_MAX_SIZE")

    # Keys
    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    google_places_api_key: str | None = Field(default=None, alias="GOOGLE_PLACES_API_KEY")

    # Bases
    geocoding_base: str = Field(default="https://maps.googleapis.com/maps/api", alias="GEOCODING_BASE")

    # Timeouts (seconds)
    geocoding_timeout_s: float = Field(default=10.0, alias="GEOCODING_TIMEOUT_S")
    auth_timeout_s: float = Field(default=5.0, alias="AUTH_TIMEOUT_S")

    # Proximity feed bounds
    default_radius_km: float = Field(default=50.0, alias="DEFAULT_RADIUS_KM")
    # half the Earth's circumference; anything larger covers the whole globe anyway
    max_radius_km: float = Field(default=20037.5, alias="MAX_RADIUS_KM")
    max_limit: int = Field(default=100, alias="MAX_LIMIT")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[1] / ".env"),  # locations_api/.env
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
