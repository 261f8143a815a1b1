import asyncio
import threading

import httpx
import pytest
from sqlalchemy import func, select

from inventory_app.models.inventory import City
from inventory_app.services import ledger, mutations
from inventory_app.services.queries import InventoryQueries
from inventory_app.services.weather import WEATHER_UNAVAILABLE, WeatherClient

pytestmark = pytest.mark.asyncio


async def test_warehouse_created_with_new_city_is_found_by_name(db, weather):
    assert db.scalar(select(City).where(City.name == "Springfield")) is None

    result = mutations.create_warehouse(db, "Main", city_name="Springfield")
    assert result.ok

    city = db.scalar(select(City).where(City.name == "Springfield"))
    houses = await InventoryQueries(db, weather).get_warehouses_by_name("Main")

    assert len(houses) == 1
    assert houses[0].id == result.entity_id
    assert houses[0].city_id == city.id
    assert houses[0].city_name == "Springfield"
    assert houses[0].weather == f"weather for {city.id}"


async def test_existing_city_is_reused(db, make_warehouse):
    make_warehouse("North", city_name="Springfield")
    make_warehouse("South", city_name="Springfield")

    assert db.scalar(select(func.count(City.id))) == 1


async def test_products_carry_inventory_and_weather_per_location(db, weather, make_product, make_warehouse):
    sku = make_product("Widget")
    north = make_warehouse("North", city_name="Oslo")
    south = make_warehouse("South", city_name="Cairo")
    ledger.record_transaction(db, sku, north, 4)
    ledger.record_transaction(db, sku, south, 6)

    [product] = await InventoryQueries(db, weather).get_products_by_sku(sku)

    assert product.name == "Widget"
    assert product.total_inventory == 10
    cities = {row.warehouse_id: row.city_id for row in product.inventory}
    assert [row.weather for row in product.inventory] == [
        f"weather for {cities[north]}",
        f"weather for {cities[south]}",
    ]
    assert sorted(weather.calls) == sorted(cities.values())


async def test_warehouses_carry_inventory(db, weather, make_product, make_warehouse):
    widget = make_product("Widget")
    gadget = make_product("Gadget")
    warehouse_id = make_warehouse("Main")
    ledger.record_transaction(db, widget, warehouse_id, 2)
    ledger.record_transaction(db, gadget, warehouse_id, 5)

    [house] = await InventoryQueries(db, weather).get_warehouses_by_id(warehouse_id)

    assert [(row.product_name, row.quantity) for row in house.inventory] == [("Widget", 2), ("Gadget", 5)]
    assert house.total_inventory == 7


async def test_key_lookups_keep_input_order_and_skip_unknown_keys(db, weather, make_product, make_warehouse):
    first = make_product("First")
    second = make_product("Second")
    make_warehouse("Main")
    queries = InventoryQueries(db, weather)

    products = await queries.get_products_by_sku(second, 999, first)
    assert [product.sku for product in products] == [second, first]
    assert await queries.get_products_by_name("Nope") == []
    assert [p.name for p in await queries.get_products_by_name("First")] == ["First"]
    assert await queries.get_warehouses_by_id(999) == []
    assert await queries.get_warehouses_by_name("Nope") == []


async def test_lists_are_ordered_paginated_and_repeatable(db, weather, make_product, make_warehouse):
    skus = [make_product(f"Product {i}") for i in range(5)]
    ids = [make_warehouse(f"House {i}", city_name=f"City {i}") for i in range(3)]
    queries = InventoryQueries(db, weather)

    assert [p.sku for p in await queries.list_products()] == skus
    assert [p.sku for p in await queries.list_products(1, 2)] == skus[1:3]
    assert [w.id for w in await queries.list_warehouses(2, 50)] == ids[2:]

    first = await queries.list_products(0, 3)
    second = await queries.list_products(0, 3)
    assert [p.model_dump() for p in first] == [p.model_dump() for p in second]


async def test_weather_fetches_run_concurrently(db, make_warehouse):
    for i in range(4):
        make_warehouse(f"House {i}", city_name=f"City {i}")

    in_flight = 0
    peak = 0

    async def slow_weather(city_id: int) -> str:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return "sunny"

    houses = await InventoryQueries(db, slow_weather).list_warehouses()
    assert [house.weather for house in houses] == ["sunny"] * 4
    assert peak == 4

    peak = 0
    await InventoryQueries(db, slow_weather, max_concurrency=2).list_warehouses()
    assert peak == 2


async def test_failed_weather_for_one_city_does_not_affect_others(db, make_warehouse):
    make_warehouse("North", city_name="Oslo")
    make_warehouse("South", city_name="Cairo")
    failing_city = db.scalar(select(City.id).where(City.name == "Oslo"))

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["id"] == str(failing_city):
            return httpx.Response(500)
        return httpx.Response(200, json={"main": {"temp": 30}, "weather": [{"description": "sunny"}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = WeatherClient(http, "secret", "https://weather.test")
        houses = await InventoryQueries(db, client.fetch_weather).list_warehouses()

    assert {house.name: house.weather for house in houses} == {
        "North": WEATHER_UNAVAILABLE,
        "South": "30.0°C, sunny",
    }


async def test_transactions_are_listed_through_the_ledger(db, weather, make_product, make_warehouse):
    sku = make_product("Widget")
    warehouse_id = make_warehouse("Main")
    for quantity in (1, 2, 3):
        ledger.record_transaction(db, sku, warehouse_id, quantity)

    rows = InventoryQueries(db, weather).list_transactions(0, 2)

    assert [row.quantity for row in rows] == [3, 2]


async def test_city_search_matches_name_prefix(db, weather):
    db.add_all(
        [
            City(id=1, name="Springfield", country="US"),
            City(id=2, name="Spring Hill", country="US"),
            City(id=3, name="Oslo", country="NO"),
        ]
    )
    db.commit()

    cities = InventoryQueries(db, weather).search_cities("spring", 10)

    assert [city.name for city in cities] == ["Spring Hill", "Springfield"]
    assert InventoryQueries(db, weather).search_cities("spring", 1)[0].id == 2


async def test_batch_sql_runs_off_the_event_loop(db, weather, make_product, make_warehouse, monkeypatch):
    sku = make_product("Widget")
    warehouse_id = make_warehouse("Main")
    ledger.record_transaction(db, sku, warehouse_id, 3)

    threads = []
    by_sku = ledger.get_inventory_for_sku
    by_warehouse = ledger.get_inventory_for_warehouse

    def recording_by_sku(session, key):
        threads.append(threading.get_ident())
        return by_sku(session, key)

    def recording_by_warehouse(session, key):
        threads.append(threading.get_ident())
        return by_warehouse(session, key)

    monkeypatch.setattr(ledger, "get_inventory_for_sku", recording_by_sku)
    monkeypatch.setattr(ledger, "get_inventory_for_warehouse", recording_by_warehouse)
    queries = InventoryQueries(db, weather)

    [product] = await queries.get_products_by_sku(sku)
    [house] = await queries.get_warehouses_by_id(warehouse_id)

    assert product.total_inventory == 3
    assert house.total_inventory == 3
    assert len(threads) == 2
    assert threading.get_ident() not in threads
