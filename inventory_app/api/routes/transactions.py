from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from inventory_app.api.deps import Page, get_page, get_queries
from inventory_app.db.database import get_db
from inventory_app.schemas.inventory import TransactionCreate, TransactionOut, TransactionResultOut
from inventory_app.services import ledger
from inventory_app.services.errors import InventoryError
from inventory_app.services.queries import InventoryQueries

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    page: Page = Depends(get_page),
    sku: int | None = Query(default=None),
    queries: InventoryQueries = Depends(get_queries),
):
    return queries.list_transactions(page.offset, page.count, sku=sku)


@router.post("", response_model=TransactionResultOut)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    try:
        result = ledger.record_transaction(db, payload.sku, payload.warehouse_id, payload.quantity)
    except InventoryError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if not result.accepted:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.detail)
    return TransactionResultOut(
        accepted=True,
        transaction_id=result.transaction_id,
        quantity=result.quantity,
    )
