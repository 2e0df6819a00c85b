# app/database.py
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings
from app.core.errors import PersistenceError

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(db_url: str):
    """
    Create the SQLAlchemy engine for the configured database.

    Postgres (hosted, via pooler):
      - sslmode=require   : enforce SSL when running in the cloud
      - pool_size=1       : keep only 1 connection to the pooler
      - max_overflow=0    : do not open extra connections beyond the pool
      - pool_pre_ping=True: validate connections before using them

    SQLite (local dev / seeding):
      - check_same_thread=False so FastAPI's threadpool can share it
    """
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Append sslmode=require if it is not already present
    if "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup and by the seeder.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session


@contextmanager
def store_errors(session: Session, action: str):
    """
    Convert SQLAlchemy failures into PersistenceError.

    The session is rolled back so it stays usable for the rest of the
    request, and the original error is logged (clients only ever see the
    generic PersistenceError detail).
    """
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Store failure while trying to %s", action, exc_info=exc)
        raise PersistenceError() from exc
