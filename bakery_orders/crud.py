"""
CRUD (Create, Read, Update, Delete) operations for the Bakery Orders service.

Each function issues a single parameterized statement. Update and delete
functions return the number of matched rows; callers decide what a zero means.
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .database import is_unique_violation

logger = logging.getLogger(__name__)


class DuplicateOrderError(Exception):
    """Raised when an order with the same order_id already exists."""

    def __init__(self, order_id: str):
        super().__init__(f"Order ID '{order_id}' already exists")
        self.order_id = order_id


def get_orders(db: Session) -> List[models.Order]:
    """
    Retrieve all orders, most recently created first.

    Args:
        db: Database session

    Returns:
        List of Order objects
    """
    return (
        db.query(models.Order)
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
        .all()
    )


def create_order(db: Session, order: schemas.OrderCreate) -> models.Order:
    """
    Insert a new order.

    Args:
        db: Database session
        order: Validated order data

    Returns:
        The inserted Order object

    Raises:
        DuplicateOrderError: if order_id is already taken
        sqlalchemy.exc.SQLAlchemyError: on any other storage failure
    """
    db_order = models.Order(
        order_id=order.order_id,
        customer_name=order.customer_name,
        product_ordered=order.product_ordered,
        quantity=order.quantity,
        order_date=order.order_date,
        status=order.status,
    )
    db.add(db_order)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            logger.info("Rejected duplicate order_id %s", order.order_id)
            raise DuplicateOrderError(order.order_id) from e
        raise
    return db_order


def replace_order(db: Session, order_id: str, order: schemas.OrderReplace) -> int:
    """
    Overwrite the mutable fields of an order.

    Args:
        db: Database session
        order_id: Identifier of the order to replace
        order: New field values; None is written as NULL

    Returns:
        Number of rows matched
    """
    matched = (
        db.query(models.Order)
        .filter(models.Order.order_id == order_id)
        .update(order.model_dump(), synchronize_session=False)
    )
    db.commit()
    return matched


def update_order_status(db: Session, order_id: str, status: str) -> int:
    """
    Change only the status column of an order.

    Returns:
        Number of rows matched
    """
    matched = (
        db.query(models.Order)
        .filter(models.Order.order_id == order_id)
        .update({"status": status}, synchronize_session=False)
    )
    db.commit()
    return matched


def delete_order(db: Session, order_id: str) -> int:
    """
    Delete an order.

    Returns:
        Number of rows deleted
    """
    deleted = (
        db.query(models.Order)
        .filter(models.Order.order_id == order_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
