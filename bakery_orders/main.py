"""
Bakery Orders Service API

This module implements a FastAPI-based service for managing bakery orders stored
in a relational ``orders`` table.

Endpoints:
    POST /api/orders: Create a new order
    GET /api/orders: List all orders, newest first
    PUT /api/orders/{order_id}: Replace the mutable fields of an order
    DELETE /api/orders/{order_id}: Delete an order
    PATCH /api/orders/{order_id}/status: Change the status of an order
    GET /healthz: Health check endpoint for orchestration systems

Every error response has the shape ``{"error": "<message>"}``. Storage
failures are logged here and reported to the caller as a generic server error.

Run with ``bakery-orders`` or ``uvicorn bakery_orders.main:create_app --factory``.
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, schemas
from .config import Settings, get_settings
from .database import Database, get_db

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _storage_failure(action: str, order_id: str) -> HTTPException:
    logger.exception("Failed to %s order %s", action, order_id)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)


@router.post(
    "",
    response_model=schemas.Acknowledgement,
    responses={400: {"model": schemas.ErrorResponse}, 409: {"model": schemas.ErrorResponse}},
)
def create_order(order: schemas.OrderCreate, db: Session = Depends(get_db)):
    """
    Create a new order.

    Raises:
        HTTPException: 409 if the order_id already exists
        HTTPException: 500 on any other storage failure
    """
    try:
        crud.create_order(db, order)
    except crud.DuplicateOrderError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Order ID already exists")
    except SQLAlchemyError:
        raise _storage_failure("create", order.order_id)

    logger.info("Order %s created with status '%s'", order.order_id, order.status)
    return schemas.Acknowledgement(message="Order added successfully")


@router.get("", response_model=List[schemas.Order])
def list_orders(db: Session = Depends(get_db)):
    """List every order, most recently created first."""
    try:
        return crud.get_orders(db)
    except SQLAlchemyError:
        logger.exception("Failed to list orders")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)


@router.put("/{order_id}", response_model=schemas.Acknowledgement)
def replace_order(
    order_id: str,
    order: Optional[schemas.OrderReplace] = None,
    db: Session = Depends(get_db),
):
    """
    Replace customer_name, product_ordered, quantity, order_date and status.

    Values are not validated; a missing body writes NULL to every field.
    Succeeds even when no order matched.
    """
    if order is None:
        order = schemas.OrderReplace()
    try:
        matched = crud.replace_order(db, order_id, order)
    except SQLAlchemyError:
        raise _storage_failure("update", order_id)

    if matched:
        logger.info("Order %s updated", order_id)
    else:
        logger.info("Update matched no order %s", order_id)
    return schemas.Acknowledgement(message="Order updated successfully")


@router.delete("/{order_id}", response_model=schemas.Acknowledgement)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    """Delete an order. Succeeds even when no order matched."""
    try:
        deleted = crud.delete_order(db, order_id)
    except SQLAlchemyError:
        raise _storage_failure("delete", order_id)

    if deleted:
        logger.info("Order %s deleted", order_id)
    else:
        logger.info("Delete matched no order %s", order_id)
    return schemas.Acknowledgement(message="Order deleted successfully")


@router.patch(
    "/{order_id}/status",
    response_model=schemas.Acknowledgement,
    responses={400: {"model": schemas.ErrorResponse}},
)
def update_order_status(order_id: str, update: schemas.StatusUpdate, db: Session = Depends(get_db)):
    """Change only the status of an order. Any status may follow any other."""
    try:
        matched = crud.update_order_status(db, order_id, update.status)
    except SQLAlchemyError:
        raise _storage_failure("update status of", order_id)

    if matched:
        logger.info("Order %s status set to '%s'", order_id, update.status)
    else:
        logger.info("Status update matched no order %s", order_id)
    return schemas.Acknowledgement(message="Status updated")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Render a rejected request body as a 400 with a single message.

    Replace does not validate its body, so a well-formed JSON body that is not
    an object fails the same way the UPDATE would: as a server error.
    """
    endpoint = request.scope.get("endpoint")
    malformed_json = any(error.get("type") == "json_invalid" for error in exc.errors())
    if endpoint is replace_order and not malformed_json:
        logger.error("Unusable body for %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": SERVER_ERROR},
        )

    if endpoint is update_order_status:
        message = "Invalid status"
    else:
        message = "Invalid input"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Verify the database is reachable before serving requests.

    A failure here is fatal: it is logged and re-raised so the server stops.
    """
    database: Database = app.state.database
    try:
        database.ping()
    except SQLAlchemyError:
        logger.exception("Database connection error")
        raise
    logger.info("Connected to database")
    yield
    database.dispose()


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Connection pool to use; built from settings when omitted
        settings: Service settings; read from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    if database is None:
        database = Database(
            settings.database_url,
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )

    app = FastAPI(title="bakery-orders-service", lifespan=lifespan)
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/healthz", response_model=dict)
    def health():
        """
        Health check endpoint for the orders service.

        Example:
            GET /healthz
            Response: {"status": "healthy"}
        """
        return {"status": "healthy"}

    app.include_router(router)
    return app


def run() -> None:
    """Entry point for the ``bakery-orders`` command."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
