"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "weather-relay"
    app_version: str = "0.1.0"
    api_prefix: str = "/api/v1"
    database_url: str = "postgresql+psycopg://weather:weather@db:5432/weather"
    db_connect_retries: int = 10
    db_connect_interval_seconds: float = 2.0
    openweather_api_key: str = ""
    openweather_url: str = "https://api.openweathermap.org/data/2.5/weather"
    openweather_timeout: float = 10.0
    openweather_units: str | None = None  # unset -> provider default (Kelvin)
    weather_cache_ttl_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

__all__ = ["settings", "Settings"]
