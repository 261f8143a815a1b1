from fastapi import APIRouter, Depends, Query

from inventory_app.api.deps import get_queries
from inventory_app.schemas.inventory import CityOut
from inventory_app.services.queries import InventoryQueries

router = APIRouter(prefix="/cities", tags=["Cities"])


@router.get("", response_model=list[CityOut])
def search_cities(
    name: str | None = Query(default=None, max_length=160),
    limit: int = Query(default=20, ge=1, le=100),
    queries: InventoryQueries = Depends(get_queries),
):
    if not name or not name.strip():
        return []
    return queries.search_cities(name, limit)
