import logging

import httpx

from inventory_app.core.config import Settings
from inventory_app.services.cache import TimedCache

logger = logging.getLogger("inventory.weather")

WEATHER_UNAVAILABLE = "Unable to obtain weather."

WeatherLookup = TimedCache[int, str]


class WeatherClient:
    """Current-weather lookups against an OpenWeatherMap-compatible endpoint.

    Never raises: any transport, status or payload problem degrades to
    ``WEATHER_UNAVAILABLE``.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, base_url: str) -> None:
        self._http = http
        self._api_key = api_key
        self._base_url = base_url

    async def fetch_weather(self, city_id: int) -> str:
        if not self._api_key:
            logger.debug("weather api key not configured, skipping lookup for city %s", city_id)
            return WEATHER_UNAVAILABLE

        try:
            response = await self._http.get(
                self._base_url,
                params={"id": city_id, "appid": self._api_key, "units": "metric"},
            )
            response.raise_for_status()
            payload = response.json()
            temperature = float(payload["main"]["temp"])
            description = str(payload["weather"][0]["description"])
        except (
            httpx.HTTPError,
            httpx.InvalidURL,
            httpx.StreamError,
            ValueError,
            KeyError,
            IndexError,
            TypeError,
        ) as exc:
            logger.warning("weather lookup failed for city %s: %s", city_id, exc)
            return WEATHER_UNAVAILABLE
        return f"{temperature:.1f}°C, {description}"


def build_weather_lookup(http: httpx.AsyncClient, settings: Settings) -> WeatherLookup:
    client = WeatherClient(http, settings.weather_api_key, settings.weather_base_url)
    return TimedCache(
        client.fetch_weather,
        ttl_minutes=settings.weather_cache_ttl_minutes,
        max_entries=settings.weather_cache_max_entries,
    )
