"""
SQLAlchemy ORM models for the Bakery Orders service.

Defines the database schema for the ``orders`` table.
"""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Enum, Integer, String, func

from .database import Base

ORDER_STATUSES = ("Pending", "Completed", "Cancelled")


class Order(Base):
    """
    Order model representing one bakery order.

    Attributes:
        id (int): Internal auto-incrementing row id
        order_id (str): Caller-supplied order identifier (e.g., "A100"), unique
        customer_name (str): Name of the customer
        product_ordered (str): Product the customer ordered
        quantity (int): Number of units ordered
        order_date (date): Date the order is for
        status (str): One of "Pending", "Completed", "Cancelled"
        created_at (datetime): Timestamp when the order was inserted
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(50), unique=True, nullable=False)
    customer_name = Column(String(100), nullable=False)
    product_ordered = Column(String(100), nullable=False)
    quantity = Column(Integer, default=1)
    order_date = Column(Date)
    status = Column(Enum(*ORDER_STATUSES, name="order_status"), default="Pending")
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.current_timestamp())
