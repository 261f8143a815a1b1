import argparse
import json
import logging
from collections.abc import Iterable
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_app.core.config import settings
from inventory_app.core.logging import setup_logging
from inventory_app.db.database import SessionLocal, init_db
from inventory_app.models.inventory import City

logger = logging.getLogger("inventory.seed")

BATCH_SIZE = 10000


def load_cities(db: Session, cities: Iterable[dict], batch_size: int = BATCH_SIZE) -> int:
    """Insert cities from the weather provider's city list, keyed by its ids.

    Ids or names already present are skipped, so reruns are harmless. Returns
    the number of rows inserted.
    """
    seen_ids = set(db.scalars(select(City.id)).all())
    seen_names = set(db.scalars(select(City.name)).all())
    inserted = 0
    for record in cities:
        city_id = int(record["id"])
        name = str(record["name"]).strip()
        if not name or city_id in seen_ids or name in seen_names:
            continue
        db.add(City(id=city_id, name=name, country=record.get("country") or None))
        seen_ids.add(city_id)
        seen_names.add(name)
        inserted += 1
        if inserted % batch_size == 0:
            db.commit()
            logger.info("%s cities loaded...", inserted)
    db.commit()
    return inserted


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load a city list JSON file into the city table.")
    parser.add_argument("path", type=Path, help="JSON array of {id, name, country} objects")
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)
    init_db()
    cities = json.loads(args.path.read_text(encoding="utf-8"))
    db = SessionLocal()
    try:
        inserted = load_cities(db, cities)
    finally:
        db.close()
    logger.info("loaded %s cities from %s", inserted, args.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
