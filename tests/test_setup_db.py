"""
Tests for the one-time setup script.
"""

from bakery_orders import models
from bakery_orders.config import Settings
from bakery_orders.database import Database
from bakery_orders.setup_db import SAMPLE_ORDERS, create_database_if_missing, create_schema, main


def _count(database):
    db = database.session()
    try:
        return db.query(models.Order).count()
    finally:
        db.close()


def test_create_schema_without_seed_leaves_table_empty():
    database = Database("sqlite://")
    assert create_schema(database) == 0
    assert _count(database) == 0


def test_create_schema_seeds_once():
    database = Database("sqlite://")
    assert create_schema(database, seed=True) == len(SAMPLE_ORDERS)
    assert create_schema(database, seed=True) == 0
    assert _count(database) == len(SAMPLE_ORDERS)


def test_create_database_skipped_for_non_mysql(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    create_database_if_missing(Settings())


def test_main_creates_and_seeds(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path}/orders.db"
    monkeypatch.setenv("DATABASE_URL", url)

    assert main(["--seed"]) == 0

    database = Database(url)
    try:
        assert _count(database) == len(SAMPLE_ORDERS)
    finally:
        database.dispose()


def test_main_reports_failure(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path}/missing/orders.db")
    assert main([]) == 1
