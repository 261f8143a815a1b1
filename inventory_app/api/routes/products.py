from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_app.api.deps import Page, get_page, get_queries
from inventory_app.api.errors import mutation_out
from inventory_app.db.database import get_db
from inventory_app.schemas.inventory import MutationOut, ProductCreate, ProductOut, ProductUpdate
from inventory_app.services import mutations
from inventory_app.services.queries import InventoryQueries

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductOut])
async def list_products(
    page: Page = Depends(get_page),
    queries: InventoryQueries = Depends(get_queries),
):
    return await queries.list_products(page.offset, page.count)


@router.get("/{sku_or_name}", response_model=list[ProductOut])
async def get_products(sku_or_name: str, queries: InventoryQueries = Depends(get_queries)):
    if sku_or_name.isdigit():
        return await queries.get_products_by_sku(int(sku_or_name))
    return await queries.get_products_by_name(sku_or_name)


@router.post("", response_model=MutationOut)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return mutation_out(mutations.create_product(db, payload.name, payload.price, payload.description))


@router.put("", response_model=MutationOut)
def update_product(payload: ProductUpdate, db: Session = Depends(get_db)):
    return mutation_out(
        mutations.update_product(db, payload.sku, payload.name, payload.price, payload.description)
    )


@router.delete("/{sku}", response_model=MutationOut)
def delete_product(sku: int, db: Session = Depends(get_db)):
    return mutation_out(mutations.delete_product(db, sku))
