"""
Database configuration and session management for the Bakery Orders service.

The connection pool is owned by a ``Database`` object that the application
constructs at startup and keeps on ``app.state``. Route handlers never touch
the engine directly; they receive a session per request through ``get_db``.
"""
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for declarative models
Base = declarative_base()

# Driver-level markers of a unique-constraint violation
MYSQL_DUP_ENTRY = 1062
POSTGRES_UNIQUE_VIOLATION = "23505"
SQLITE_UNIQUE_MESSAGE = "UNIQUE constraint failed"


class Database:
    """
    Pooled connection manager shared by all requests.

    Attributes:
        url (str): SQLAlchemy database URL
        engine (Engine): SQLAlchemy engine holding the connection pool
        SessionLocal (sessionmaker): factory for request-scoped sessions
    """

    def __init__(self, url: str, pool_size: int = 10, pool_timeout: float = 30.0):
        self.url = url
        if url.startswith("sqlite"):
            # SQLite is used for local runs and tests; one shared connection
            # keeps an in-memory database alive across threads.
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                url,
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> None:
        """
        Check that a connection can be acquired and used.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: if the database is unreachable
        """
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def create_tables(self) -> None:
        # Imported for its side effect of registering the tables on Base
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    The session is closed, and its connection returned to the pool, on every
    exit path of the handler, including raised exceptions.

    Yields:
        Session: SQLAlchemy database session
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell a unique-constraint violation apart from other integrity errors.

    Args:
        error: IntegrityError raised by SQLAlchemy

    Returns:
        True if the underlying driver reported a duplicate key
    """
    orig = getattr(error, "orig", None)
    if orig is None:
        return False

    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUP_ENTRY:
        return True

    if getattr(orig, "pgcode", None) == POSTGRES_UNIQUE_VIOLATION:
        return True

    return SQLITE_UNIQUE_MESSAGE in str(orig)
