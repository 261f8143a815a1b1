from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_app.api.deps import Page, get_page, get_queries
from inventory_app.api.errors import mutation_out
from inventory_app.db.database import get_db
from inventory_app.schemas.inventory import MutationOut, WarehouseCreate, WarehouseOut, WarehouseUpdate
from inventory_app.services import mutations
from inventory_app.services.queries import InventoryQueries

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


@router.get("", response_model=list[WarehouseOut])
async def list_warehouses(
    page: Page = Depends(get_page),
    queries: InventoryQueries = Depends(get_queries),
):
    return await queries.list_warehouses(page.offset, page.count)


@router.get("/{id_or_name}", response_model=list[WarehouseOut])
async def get_warehouses(id_or_name: str, queries: InventoryQueries = Depends(get_queries)):
    if id_or_name.isdigit():
        return await queries.get_warehouses_by_id(int(id_or_name))
    return await queries.get_warehouses_by_name(id_or_name)


@router.post("", response_model=MutationOut)
def create_warehouse(payload: WarehouseCreate, db: Session = Depends(get_db)):
    return mutation_out(
        mutations.create_warehouse(db, payload.name, city_name=payload.city_name, city_id=payload.city_id)
    )


@router.put("", response_model=MutationOut)
def update_warehouse(payload: WarehouseUpdate, db: Session = Depends(get_db)):
    return mutation_out(
        mutations.update_warehouse(
            db,
            payload.id,
            payload.name,
            city_name=payload.city_name,
            city_id=payload.city_id,
        )
    )


@router.delete("/{warehouse_id}", response_model=MutationOut)
def delete_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    return mutation_out(mutations.delete_warehouse(db, warehouse_id))
