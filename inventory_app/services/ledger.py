import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_app.models.inventory import InventoryChange, InventoryPosition, Product, Warehouse
from inventory_app.schemas.inventory import ProductInventoryOut, TransactionOut, WarehouseInventoryOut
from inventory_app.services.errors import InvalidTransactionError, ReferenceNotFoundError

logger = logging.getLogger("inventory.ledger")

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class TransactionResult:
    accepted: bool
    quantity: int
    transaction_id: int | None = None
    detail: str | None = None


def record_transaction(db: Session, sku: int, warehouse_id: int, quantity: int) -> TransactionResult:
    """Append a stock movement to the ledger and update the on-hand position.

    A movement that would take the position below zero is rejected with nothing
    written and reported through ``TransactionResult.accepted``. Accepted
    movements write the ledger row and the position row in one transaction.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity == 0:
        raise InvalidTransactionError("quantity must be a nonzero integer")
    if db.get(Product, sku) is None:
        raise ReferenceNotFoundError(f"Product {sku} not found")
    if db.get(Warehouse, warehouse_id) is None:
        raise ReferenceNotFoundError(f"Warehouse {warehouse_id} not found")

    try:
        position = db.scalar(
            select(InventoryPosition)
            .where(InventoryPosition.sku == sku, InventoryPosition.warehouse_id == warehouse_id)
            .with_for_update()
        )
        quantity_before = position.quantity if position else 0
        quantity_after = quantity_before + quantity
        if quantity_after < 0:
            db.rollback()
            logger.info(
                "rejected movement of %s for sku %s at warehouse %s: on hand %s",
                quantity,
                sku,
                warehouse_id,
                quantity_before,
            )
            return TransactionResult(
                accepted=False,
                quantity=quantity_before,
                detail="Transaction would make inventory negative",
            )

        change = InventoryChange(sku=sku, warehouse_id=warehouse_id, quantity=quantity)
        db.add(change)
        if position is None:
            db.add(InventoryPosition(sku=sku, warehouse_id=warehouse_id, quantity=quantity_after))
        else:
            position.quantity = quantity_after
        db.flush()
        transaction_id = change.id
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("ledger write failed for sku %s at warehouse %s", sku, warehouse_id)
        raise

    return TransactionResult(accepted=True, quantity=quantity_after, transaction_id=transaction_id)


def get_inventory_for_sku(db: Session, sku: int) -> list[ProductInventoryOut]:
    rows = db.execute(
        select(Warehouse.id, Warehouse.name, Warehouse.city_id, InventoryPosition.quantity)
        .select_from(InventoryPosition)
        .join(Warehouse, Warehouse.id == InventoryPosition.warehouse_id)
        .where(InventoryPosition.sku == sku)
        .order_by(Warehouse.id.asc())
    ).all()
    return [
        ProductInventoryOut(warehouse_id=row[0], warehouse_name=row[1], city_id=row[2], quantity=row[3])
        for row in rows
    ]


def get_inventory_for_warehouse(db: Session, warehouse_id: int) -> list[WarehouseInventoryOut]:
    rows = db.execute(
        select(Product.sku, Product.name, InventoryPosition.quantity)
        .select_from(InventoryPosition)
        .join(Product, Product.sku == InventoryPosition.sku)
        .where(InventoryPosition.warehouse_id == warehouse_id)
        .order_by(Product.sku.asc())
    ).all()
    return [WarehouseInventoryOut(sku=row[0], product_name=row[1], quantity=row[2]) for row in rows]


def list_transactions(
    db: Session,
    offset: int = 0,
    count: int = DEFAULT_PAGE_SIZE,
    sku: int | None = None,
) -> list[TransactionOut]:
    query = (
        select(
            InventoryChange.id,
            InventoryChange.sku,
            Product.name,
            InventoryChange.warehouse_id,
            Warehouse.name,
            InventoryChange.quantity,
            InventoryChange.created_at,
        )
        .select_from(InventoryChange)
        .outerjoin(Product, Product.sku == InventoryChange.sku)
        .outerjoin(Warehouse, Warehouse.id == InventoryChange.warehouse_id)
        .order_by(InventoryChange.id.desc())
    )
    if sku is not None:
        query = query.where(InventoryChange.sku == sku)
    rows = db.execute(query.offset(offset).limit(count)).all()
    return [
        TransactionOut(
            id=row[0],
            sku=row[1],
            product_name=row[2],
            warehouse_id=row[3],
            warehouse_name=row[4],
            quantity=row[5],
            created_at=row[6],
        )
        for row in rows
    ]
