import logging
import time

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, text

from summary_memory.core.config import settings

logger = logging.getLogger(__name__)
DB_STARTUP_MAX_ATTEMPTS = 30
DB_STARTUP_RETRY_DELAY_SECONDS = 1.0

_app_engine: Engine | None = None


def _safe_url(value) -> str:
    return value.render_as_string(hide_password=True)


def get_app_engine() -> Engine:
    global _app_engine
    if _app_engine is None:
        _app_engine = create_engine(settings.app_database_url)
    return _app_engine


def _wait_for_connection(
    engine: Engine,
    name: str,
    max_attempts: int = DB_STARTUP_MAX_ATTEMPTS,
    retry_delay: float = DB_STARTUP_RETRY_DELAY_SECONDS,
) -> None:
    last_error: Exception | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            logger.info(
                "Waiting for %s (attempt %d/%d): %s",
                name,
                attempt,
                max_attempts,
                exc,
            )
            if attempt < max_attempts:
                time.sleep(retry_delay)

    if last_error:
        raise last_error


def ensure_app_database_exists(engine: Engine) -> None:
    """Create the PostgreSQL database behind ``engine`` if it is missing."""
    url = engine.url
    database_name = url.database

    if url.get_backend_name() != "postgresql" or not database_name:
        _wait_for_connection(engine, f"memory database '{_safe_url(url)}'")
        return

    admin_engine = create_engine(url.set(database="postgres"), isolation_level="AUTOCOMMIT")
    try:
        _wait_for_connection(admin_engine, "postgres admin database")

        with admin_engine.connect() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": database_name},
            ).scalar()

            if not exists:
                safe_database_name = database_name.replace('"', '""')
                conn.execute(text(f'CREATE DATABASE "{safe_database_name}"'))
                logger.info(
                    "Created PostgreSQL database '%s' because it did not exist.",
                    database_name,
                )
    finally:
        admin_engine.dispose()

    _wait_for_connection(engine, f"memory database '{database_name}'")


def init_app_database(engine: Engine | None = None) -> Engine:
    engine = engine or get_app_engine()
    logger.info("Initializing memory database on %s", _safe_url(engine.url))
    ensure_app_database_exists(engine)

    from summary_memory.core.memorystore.models import MemoryEntryRecord

    _ = MemoryEntryRecord
    SQLModel.metadata.create_all(engine)
    logger.info("Memory tables are ready on %s", _safe_url(engine.url))
    return engine


def close_app_database() -> None:
    global _app_engine
    if _app_engine is not None:
        _app_engine.dispose()
        _app_engine = None
        logger.info("Database engine disposed.")
