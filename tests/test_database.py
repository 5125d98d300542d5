"""
Tests for the database access layer: unique-violation detection, sessions,
and the fatal startup check.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from bakery_orders import models
from bakery_orders.config import Settings
from bakery_orders.database import Database, is_unique_violation
from bakery_orders.main import create_app


class FakeMySQLError(Exception):
    pass


class FakePostgresError(Exception):
    def __init__(self, pgcode):
        super().__init__("integrity error")
        self.pgcode = pgcode


def _integrity_error(orig):
    return IntegrityError("INSERT INTO orders ...", {}, orig)


def _row(order_id="A1", **overrides):
    fields = {
        "order_id": order_id,
        "customer_name": "Jo",
        "product_ordered": "Bread",
        "quantity": 2,
    }
    fields.update(overrides)
    return models.Order(**fields)


# --- is_unique_violation ---


def test_mysql_duplicate_entry_is_unique_violation():
    err = _integrity_error(FakeMySQLError(1062, "Duplicate entry 'A1' for key 'order_id'"))
    assert is_unique_violation(err)


def test_mysql_not_null_is_not_unique_violation():
    err = _integrity_error(FakeMySQLError(1048, "Column 'customer_name' cannot be null"))
    assert not is_unique_violation(err)


def test_postgres_unique_violation():
    assert is_unique_violation(_integrity_error(FakePostgresError("23505")))
    assert not is_unique_violation(_integrity_error(FakePostgresError("23502")))


def test_sqlite_duplicate_insert_is_unique_violation(database):
    db = database.session()
    try:
        db.add(_row())
        db.commit()
        db.add(_row())
        with pytest.raises(IntegrityError) as excinfo:
            db.commit()
        db.rollback()
    finally:
        db.close()
    assert is_unique_violation(excinfo.value)


def test_sqlite_not_null_is_not_unique_violation(database):
    db = database.session()
    try:
        db.add(_row(customer_name=None))
        with pytest.raises(IntegrityError) as excinfo:
            db.commit()
        db.rollback()
    finally:
        db.close()
    assert not is_unique_violation(excinfo.value)


# --- Database ---


def test_storage_defaults(database):
    db = database.session()
    try:
        db.add(_row())
        db.commit()
        stored = db.query(models.Order).one()
        assert stored.status == "Pending"
        assert stored.created_at is not None
        assert stored.order_date is None
    finally:
        db.close()


def test_ping(database):
    database.ping()


def test_startup_fails_when_database_unreachable(tmp_path):
    database = Database(f"sqlite:///{tmp_path}/missing/orders.db")
    app = create_app(database=database, settings=Settings())

    with pytest.raises(OperationalError):
        with TestClient(app):
            pass
