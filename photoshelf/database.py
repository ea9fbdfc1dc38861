"""Database connection, initialization and transaction scope."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

from photoshelf.config import settings
from photoshelf.errors import ConflictError, StorageError

# Import all models so SQLModel registers them
import photoshelf.models  # noqa: F401

logger = logging.getLogger(__name__)


def make_engine(url: str, echo: bool = False):
    """Create an engine; SQLite connections get foreign keys and a busy timeout."""
    is_sqlite = url.startswith("sqlite")
    connect_args = {}
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": settings.db_busy_timeout}
    new_engine = create_engine(url, echo=echo, connect_args=connect_args)

    if is_sqlite:
        # foreign_keys is a per-connection pragma, so set it on every connect
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = make_engine(settings.database_url, echo=settings.debug)


def init_db(target=None) -> None:
    """Create all tables and enable WAL mode."""
    target = target or engine
    SQLModel.metadata.create_all(target)

    if target.dialect.name == "sqlite":
        # WAL for better concurrent read performance
        with target.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql("PRAGMA synchronous=NORMAL")
            conn.commit()


def get_session():
    """FastAPI dependency: yields a database session."""
    with Session(engine) as session:
        yield session


@contextmanager
def storage_errors() -> Iterator[None]:
    """Translate SQLAlchemy failures on read paths into the store's taxonomy."""
    try:
        yield
    except IntegrityError as e:
        raise ConflictError("Constraint violation") from e
    except SQLAlchemyError as e:
        logger.error("Storage failure: %s", e, exc_info=True)
        raise StorageError("Storage failure") from e


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Run a block as one atomic unit.

    Commits only when the block completes; any exception rolls back every
    write made inside it and is re-raised (SQLAlchemy errors translated).
    """
    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info("Transaction rolled back on constraint violation: %s", e.orig)
        raise ConflictError("Constraint violation") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Transaction rolled back on storage failure: %s", e, exc_info=True)
        raise StorageError("Storage failure") from e
    except BaseException:
        session.rollback()
        raise
