import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    cors_origins: tuple[str, ...]
    log_level: str
    auto_create_tables: bool
    default_page_size: int
    max_page_size: int
    weather_api_key: str
    weather_base_url: str
    weather_timeout_seconds: int
    weather_cache_ttl_minutes: int
    weather_cache_max_entries: int
    weather_max_concurrency: int


settings = Settings(
    app_name=os.getenv("APP_NAME", "Warehouse Inventory API"),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./inventory.sqlite"),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    auto_create_tables=_env_bool("AUTO_CREATE_TABLES", True),
    default_page_size=_env_int("DEFAULT_PAGE_SIZE", 50, min_value=1),
    max_page_size=_env_int("MAX_PAGE_SIZE", 500, min_value=1),
    weather_api_key=os.getenv("WEATHER_API_KEY", ""),
    weather_base_url=os.getenv("WEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather"),
    weather_timeout_seconds=_env_int("WEATHER_TIMEOUT_SECONDS", 10, min_value=1),
    weather_cache_ttl_minutes=_env_int("WEATHER_CACHE_TTL_MINUTES", 30, min_value=0),
    weather_cache_max_entries=_env_int("WEATHER_CACHE_MAX_ENTRIES", 0, min_value=0),
    weather_max_concurrency=_env_int("WEATHER_MAX_CONCURRENCY", 0, min_value=0),
)
