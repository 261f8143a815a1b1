from dataclasses import dataclass

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from inventory_app.core.config import settings
from inventory_app.db.database import get_db
from inventory_app.services.queries import InventoryQueries
from inventory_app.services.weather import WeatherLookup


@dataclass(frozen=True)
class Page:
    offset: int
    count: int


def get_page(
    offset: int = Query(default=0, ge=0),
    count: int | None = Query(default=None, ge=1),
) -> Page:
    if count is None:
        count = settings.default_page_size
    return Page(offset=offset, count=min(count, settings.max_page_size))


def get_weather(request: Request) -> WeatherLookup:
    return request.app.state.weather_lookup


def get_queries(
    db: Session = Depends(get_db),
    weather: WeatherLookup = Depends(get_weather),
) -> InventoryQueries:
    return InventoryQueries(db, weather, max_concurrency=settings.weather_max_concurrency)
