"""
Pydantic schemas for request/response validation in the Bakery Orders service.

Each operation parses its request body into its own schema. A body that does
not parse is rejected as a whole; handlers never see a partially populated
object.
"""
from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

# Statuses a client may set through create and status-update. The table also
# allows "Cancelled" (see models.ORDER_STATUSES).
WritableStatus = Literal["Pending", "Completed"]


class OrderCreate(BaseModel):
    """Schema for creating a new order."""
    order_id: str = Field(..., min_length=1, description="Caller-supplied order identifier")
    customer_name: str = Field(..., min_length=1)
    product_ordered: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Number of units, a positive whole number")
    order_date: date
    status: WritableStatus = "Pending"

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_means_pending(cls, value):
        return value or "Pending"


class OrderReplace(BaseModel):
    """
    Schema for replacing the mutable fields of an order.

    Nothing is rejected here: values are handed to the UPDATE as sent and any
    failure comes from the database. Every field overwrites the stored value,
    so an omitted field is written as NULL.
    """
    customer_name: Optional[Any] = None
    product_ordered: Optional[Any] = None
    quantity: Optional[Any] = None
    order_date: Optional[Any] = None
    status: Optional[Any] = None

    @field_validator("order_date", mode="before")
    @classmethod
    def iso_date_string_to_date(cls, value):
        # Drivers such as SQLite only bind date objects; anything else is
        # passed through for the database to accept or refuse.
        if isinstance(value, str):
            try:
                return date.fromisoformat(value)
            except ValueError:
                return value
        return value


class StatusUpdate(BaseModel):
    """Schema for changing only the status of an order."""
    status: WritableStatus


class Order(BaseModel):
    """
    Schema for order responses, includes all database fields.

    Attributes:
        id (int): Internal row id
        order_id (str): Order's unique identifier
        customer_name (str): Customer name
        product_ordered (str): Product ordered
        quantity (int): Units ordered
        order_date (date): Date of the order
        status (str): Order status
        created_at (datetime): When the order was created
    """
    id: int
    order_id: str
    customer_name: str
    product_ordered: str
    quantity: Optional[int] = None
    order_date: Optional[date] = None
    status: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class Acknowledgement(BaseModel):
    """Body returned by successful write operations."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Body returned by every failed request."""
    error: str
