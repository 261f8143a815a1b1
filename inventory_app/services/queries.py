import asyncio
from collections.abc import Awaitable, Callable, Sequence

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from inventory_app.models.inventory import City, Product, Warehouse
from inventory_app.schemas.inventory import CityOut, ProductOut, TransactionOut, WarehouseOut
from inventory_app.services import ledger
from inventory_app.services.ledger import DEFAULT_PAGE_SIZE

WeatherFetcher = Callable[[int], Awaitable[str]]


class InventoryQueries:
    """Read models for products, warehouses and the ledger.

    Keyed lookups return one entity per matching key in input order; keys with
    no row are skipped. The SQL for a batch runs in the threadpool, then weather
    for every entity in the batch is fetched concurrently and joined before the
    batch is returned. ``max_concurrency`` caps in-flight weather fetches, ``0``
    leaves them uncapped.
    """

    def __init__(self, db: Session, weather: WeatherFetcher, max_concurrency: int = 0) -> None:
        self.db = db
        self._weather = weather
        self._limiter = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def _fetch_weather(self, city_id: int) -> str:
        if self._limiter is None:
            return await self._weather(city_id)
        async with self._limiter:
            return await self._weather(city_id)

    # Products

    async def get_products_by_sku(self, *skus: int) -> list[ProductOut]:
        def load() -> list[ProductOut]:
            return self._load_products([self.db.get(Product, sku) for sku in skus])

        return await self._enrich_products(await run_in_threadpool(load))

    async def get_products_by_name(self, *names: str) -> list[ProductOut]:
        def load() -> list[ProductOut]:
            return self._load_products(
                [self.db.scalar(select(Product).where(Product.name == name)) for name in names]
            )

        return await self._enrich_products(await run_in_threadpool(load))

    async def list_products(self, offset: int = 0, count: int = DEFAULT_PAGE_SIZE) -> list[ProductOut]:
        def load() -> list[ProductOut]:
            return self._load_products(
                self.db.scalars(select(Product).order_by(Product.sku.asc()).offset(offset).limit(count)).all()
            )

        return await self._enrich_products(await run_in_threadpool(load))

    def _load_products(self, rows: Sequence[Product | None]) -> list[ProductOut]:
        return [
            ProductOut(
                sku=row.sku,
                name=row.name,
                price=row.price,
                description=row.description,
                inventory=ledger.get_inventory_for_sku(self.db, row.sku),
            )
            for row in rows
            if row is not None
        ]

    async def _enrich_products(self, products: list[ProductOut]) -> list[ProductOut]:
        positions = [position for product in products for position in product.inventory]
        forecasts = await asyncio.gather(*(self._fetch_weather(position.city_id) for position in positions))
        for position, forecast in zip(positions, forecasts):
            position.weather = forecast
        return products

    # Warehouses

    def _warehouse_query(self):
        return select(Warehouse.id, Warehouse.name, Warehouse.city_id, City.name).join(
            City, City.id == Warehouse.city_id
        )

    async def get_warehouses_by_id(self, *ids: int) -> list[WarehouseOut]:
        def load() -> list[WarehouseOut]:
            return self._load_warehouses(
                [self.db.execute(self._warehouse_query().where(Warehouse.id == id_)).first() for id_ in ids]
            )

        return await self._enrich_warehouses(await run_in_threadpool(load))

    async def get_warehouses_by_name(self, *names: str) -> list[WarehouseOut]:
        def load() -> list[WarehouseOut]:
            return self._load_warehouses(
                [self.db.execute(self._warehouse_query().where(Warehouse.name == name)).first() for name in names]
            )

        return await self._enrich_warehouses(await run_in_threadpool(load))

    async def list_warehouses(self, offset: int = 0, count: int = DEFAULT_PAGE_SIZE) -> list[WarehouseOut]:
        def load() -> list[WarehouseOut]:
            return self._load_warehouses(
                self.db.execute(
                    self._warehouse_query().order_by(Warehouse.id.asc()).offset(offset).limit(count)
                ).all()
            )

        return await self._enrich_warehouses(await run_in_threadpool(load))

    def _load_warehouses(self, rows) -> list[WarehouseOut]:
        return [
            WarehouseOut(
                id=row[0],
                name=row[1],
                city_id=row[2],
                city_name=row[3],
                inventory=ledger.get_inventory_for_warehouse(self.db, row[0]),
            )
            for row in rows
            if row is not None
        ]

    async def _enrich_warehouses(self, warehouses: list[WarehouseOut]) -> list[WarehouseOut]:
        forecasts = await asyncio.gather(*(self._fetch_weather(house.city_id) for house in warehouses))
        for house, forecast in zip(warehouses, forecasts):
            house.weather = forecast
        return warehouses

    # Ledger and cities

    def list_transactions(
        self,
        offset: int = 0,
        count: int = DEFAULT_PAGE_SIZE,
        sku: int | None = None,
    ) -> list[TransactionOut]:
        return ledger.list_transactions(self.db, offset=offset, count=count, sku=sku)

    def search_cities(self, name: str, limit: int = 20) -> list[CityOut]:
        rows = self.db.scalars(
            select(City)
            .where(func.lower(City.name).startswith(name.strip().lower(), autoescape=True))
            .order_by(City.name.asc(), City.id.asc())
            .limit(limit)
        ).all()
        return [CityOut.model_validate(row) for row in rows]
