import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_app.models.inventory import City, Product, Warehouse
from inventory_app.services.errors import EntityNotFoundError

logger = logging.getLogger("inventory.mutations")


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    entity_id: int | None = None
    error: Exception | None = None


def _failed(db: Session, action: str, exc: Exception) -> MutationResult:
    db.rollback()
    logger.warning("%s failed: %s", action, exc)
    return MutationResult(ok=False, error=exc)


def _find_city(db: Session, name: str) -> City | None:
    return db.scalar(select(City).where(City.name == name).order_by(City.id.asc()).limit(1))


def get_or_create_city(db: Session, name: str) -> City:
    """Return the city called ``name``, inserting it first when it is missing.

    The insert is flushed, not committed, so it lands in the caller's
    transaction. Losing a race on the unique name rolls the session back and
    falls back to the winner's row, so call this before staging other changes.
    """
    name = name.strip()
    city = _find_city(db, name)
    if city is not None:
        return city

    city = City(name=name)
    db.add(city)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("city %r created concurrently, reusing existing row", name)
        city = _find_city(db, name)
        if city is None:
            raise
    return city


def _resolve_city_id(db: Session, city_name: str | None, city_id: int | None) -> int:
    if city_id is not None:
        if db.get(City, city_id) is None:
            raise EntityNotFoundError(f"City {city_id} not found")
        return city_id
    if not city_name:
        raise ValueError("Either city_name or city_id is required")
    return get_or_create_city(db, city_name).id


# Products


def create_product(db: Session, name: str, price: Decimal, description: str | None = None) -> MutationResult:
    product = Product(name=name.strip(), price=price, description=description)
    db.add(product)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        return _failed(db, "create product", exc)
    return MutationResult(ok=True, entity_id=product.sku)


def update_product(
    db: Session,
    sku: int,
    name: str,
    price: Decimal,
    description: str | None = None,
) -> MutationResult:
    product = db.get(Product, sku)
    if product is None:
        return _failed(db, "update product", EntityNotFoundError(f"Product {sku} not found"))

    product.name = name.strip()
    product.price = price
    product.description = description
    try:
        db.commit()
    except SQLAlchemyError as exc:
        return _failed(db, "update product", exc)
    return MutationResult(ok=True, entity_id=sku)


def delete_product(db: Session, sku: int) -> MutationResult:
    """Remove the product row only; its inventory positions and ledger rows stay behind."""
    product = db.get(Product, sku)
    if product is None:
        return _failed(db, "delete product", EntityNotFoundError(f"Product {sku} not found"))

    db.delete(product)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        return _failed(db, "delete product", exc)
    return MutationResult(ok=True, entity_id=sku)


# Warehouses


def create_warehouse(
    db: Session,
    name: str,
    city_name: str | None = None,
    city_id: int | None = None,
) -> MutationResult:
    try:
        resolved_city_id = _resolve_city_id(db, city_name, city_id)
        warehouse = Warehouse(name=name.strip(), city_id=resolved_city_id)
        db.add(warehouse)
        db.commit()
    except (SQLAlchemyError, EntityNotFoundError, ValueError) as exc:
        return _failed(db, "create warehouse", exc)
    return MutationResult(ok=True, entity_id=warehouse.id)


def update_warehouse(
    db: Session,
    warehouse_id: int,
    name: str,
    city_name: str | None = None,
    city_id: int | None = None,
) -> MutationResult:
    warehouse = db.get(Warehouse, warehouse_id)
    if warehouse is None:
        return _failed(db, "update warehouse", EntityNotFoundError(f"Warehouse {warehouse_id} not found"))

    try:
        warehouse.city_id = _resolve_city_id(db, city_name, city_id)
        warehouse.name = name.strip()
        db.commit()
    except (SQLAlchemyError, EntityNotFoundError, ValueError) as exc:
        return _failed(db, "update warehouse", exc)
    return MutationResult(ok=True, entity_id=warehouse_id)


def delete_warehouse(db: Session, warehouse_id: int) -> MutationResult:
    """Remove the warehouse row only; its inventory positions and ledger rows stay behind."""
    warehouse = db.get(Warehouse, warehouse_id)
    if warehouse is None:
        return _failed(db, "delete warehouse", EntityNotFoundError(f"Warehouse {warehouse_id} not found"))

    db.delete(warehouse)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        return _failed(db, "delete warehouse", exc)
    return MutationResult(ok=True, entity_id=warehouse_id)
