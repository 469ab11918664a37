"""
Database configuration and session management.

Provides:
- Database engine creation with proper configuration
- SessionLocal factory for creating database sessions
- get_db() dependency for FastAPI request-scoped sessions
- Bounded retries for idempotent read paths
- Database initialization utilities
"""

import functools
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from court_scheduler.config import get_settings
from court_scheduler.exceptions import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Get settings
settings = get_settings()

# Validate production configuration
if settings.is_production:
    settings.validate_production_config()


def is_memory_sqlite(database_url: str) -> bool:
    """Check if a URL names an in-memory SQLite database."""
    url = database_url.lower()
    if not url.startswith("sqlite"):
        return False
    path = url.split("://", 1)[-1].lstrip("/")
    return path in ("", ":memory:") or "mode=memory" in url


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for a database URL.

    In-memory SQLite lives on a single connection, so it gets StaticPool.
    File SQLite and PostgreSQL get a real pool: every session checks out its
    own connection and therefore its own transaction.
    """
    if is_memory_sqlite(database_url):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},  # Threadpool handlers share the connection
            poolclass=StaticPool,
            echo=echo,
        )

    if database_url.lower().startswith("sqlite"):
        return create_engine(
            database_url,
            # Pooled connections are returned from one worker thread and reused by another
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=echo,
        )

    # PostgreSQL-specific configuration
    return create_engine(
        database_url,
        pool_size=5,  # Maximum number of connections in pool
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Test connections before using them
        echo=echo,
    )


def build_sessionmaker(bind: Engine) -> sessionmaker:
    """Session factory with the application's flush and commit settings."""
    return sessionmaker(
        autocommit=False,  # Explicit commits required
        autoflush=False,  # Don't flush automatically before queries
        expire_on_commit=False,  # Routes serialize objects after services commit
        bind=bind,
    )


if settings.uses_sqlite:
    # Enable foreign key constraints for SQLite
    @event.listens_for(Engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        """Enable foreign key constraints in SQLite."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(settings.database_url, echo=settings.log_level == "DEBUG")

# Session factory
SessionLocal = build_sessionmaker(engine)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for request-scoped database sessions.

    Yields a database session that is automatically closed after the request.
    Automatically rolls back on exception. Booking writes commit inside the
    lifecycle services (while the court lock is held), so the final commit
    here only covers catalog and blackout changes.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()  # Commit on successful request
    except Exception:
        db.rollback()  # Rollback on error
        raise
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside FastAPI.

    Usage for scripts, tests, or background tasks:
        with get_db_context() as db:
            court = db.get(Court, court_id)
            court.is_active = False
            # Automatic commit on context exit

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _is_transient_error(exception: BaseException) -> bool:
    """Check if a database error should trigger a read retry."""
    return isinstance(exception, OperationalError)


def retry_read(func: Callable[..., T]) -> Callable[..., T]:
    """
    Retry a read-only service function on transient database errors.

    The wrapped function must take the session as its first argument and must
    not write. The session is rolled back between attempts so a broken
    connection is replaced. Writes are never wrapped: a failed write is
    re-validated by the caller, not replayed.
    """

    @functools.wraps(func)
    def wrapper(session: Session, *args, **kwargs) -> T:
        current = get_settings()
        attempts = current.read_retry_attempts

        def _before_retry(retry_state: RetryCallState) -> None:
            logger.warning(
                f"{func.__name__} failed (attempt {retry_state.attempt_number}/{attempts}): "
                f"{retry_state.outcome.exception()}"
            )
            session.rollback()

        retrying = Retrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(current.read_retry_delay_seconds),
            retry=retry_if_exception(_is_transient_error),
            before_sleep=_before_retry,
            reraise=True,
        )
        try:
            return retrying(func, session, *args, **kwargs)
        except OperationalError as e:
            session.rollback()
            logger.error(f"{func.__name__} gave up after {attempts} attempts: {e}")
            raise PersistenceError(
                f"Database unavailable while running {func.__name__}",
                original_error=e,
            )

    return wrapper


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    prefix = "sqlite:///"
    if not database_url.startswith(prefix):
        return
    path = database_url[len(prefix):]
    if not path or path == ":memory:":
        return
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def init_db() -> None:
    """
    Initialize database by creating all tables.

    This is useful for development and testing. In production, use Alembic migrations.
    """
    from court_scheduler.models.base import Base
    import court_scheduler.models  # noqa: F401  (register all tables)

    _ensure_sqlite_directory(settings.database_url)
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def drop_all_tables() -> None:
    """
    Drop all tables from the database.

    WARNING: This will delete all data. Use with caution.
    Primarily for testing and development.
    """
    from court_scheduler.models.base import Base

    logger.warning("Dropping all database tables...")
    Base.metadata.drop_all(bind=engine)
    logger.info("All database tables dropped")


def check_connection(session: Session) -> bool:
    """
    Test database connection.

    Args:
        session: Session to check

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        session.execute(text("SELECT 1"))
        return True
    except OperationalError as e:
        logger.error(f"Database connection failed: {e}")
        return False
