"""
One-time database setup for the Bakery Orders service.

Creates the database (MySQL only) and the ``orders`` table if they do not
exist, and optionally seeds a few sample orders. Run it once, out of band
from the service:

    bakery-orders-setup --seed
"""
import argparse
import logging
import sys
from datetime import date
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from . import models
from .config import Settings, get_settings
from .database import Database

logger = logging.getLogger(__name__)

SAMPLE_ORDERS = [
    {
        "order_id": "ORD001",
        "customer_name": "John Smith",
        "product_ordered": "Sourdough Loaf",
        "quantity": 2,
        "order_date": date(2024, 1, 15),
        "status": "Completed",
    },
    {
        "order_id": "ORD002",
        "customer_name": "Maria Garcia",
        "product_ordered": "Croissant",
        "quantity": 6,
        "order_date": date(2024, 1, 16),
        "status": "Pending",
    },
    {
        "order_id": "ORD003",
        "customer_name": "Aiko Tanaka",
        "product_ordered": "Chocolate Cake",
        "quantity": 1,
        "order_date": date(2024, 1, 17),
        "status": "Pending",
    },
]


def create_database_if_missing(settings: Settings) -> None:
    """
    Run ``CREATE DATABASE IF NOT EXISTS`` against the server.

    Skipped when DATABASE_URL points at something other than MySQL.
    """
    if not settings.database_url.startswith("mysql"):
        logger.info("Skipping database creation for %s", settings.database_url.split(":", 1)[0])
        return

    engine = create_engine(settings.server_url)
    try:
        with engine.begin() as connection:
            # Identifiers cannot be bound as parameters; quote the name instead.
            name = settings.DB_NAME.replace("`", "``")
            connection.execute(text(f"CREATE DATABASE IF NOT EXISTS `{name}`"))
    finally:
        engine.dispose()
    logger.info("Database %s created or already exists", settings.DB_NAME)


def create_schema(database: Database, seed: bool = False) -> int:
    """
    Create the orders table and optionally seed it.

    Sample orders are only inserted into an empty table, so running this
    twice does not duplicate them.

    Args:
        database: Target database
        seed: Insert SAMPLE_ORDERS when the table is empty

    Returns:
        Number of sample orders inserted
    """
    database.create_tables()
    logger.info("Orders table created or already exists")

    if not seed:
        return 0

    db = database.session()
    try:
        if db.query(models.Order).count():
            logger.info("Orders table already has data, skipping sample orders")
            return 0
        db.add_all(models.Order(**sample) for sample in SAMPLE_ORDERS)
        db.commit()
    finally:
        db.close()
    logger.info("Inserted %d sample orders", len(SAMPLE_ORDERS))
    return len(SAMPLE_ORDERS)


def main(argv: Optional[list] = None) -> int:
    """Entry point for the ``bakery-orders-setup`` command."""
    parser = argparse.ArgumentParser(description="Create the bakery orders database and table.")
    parser.add_argument("--seed", action="store_true", help="insert sample orders into an empty table")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    database = None
    try:
        create_database_if_missing(settings)
        database = Database(settings.database_url)
        create_schema(database, seed=args.seed)
    except SQLAlchemyError:
        logger.exception("Database setup failed")
        return 1
    finally:
        if database is not None:
            database.dispose()

    logger.info("Database setup completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
