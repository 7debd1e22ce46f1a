"""
Database initialization utilities.
"""
import logging
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import make_url

from planmap.db.models import Base
from planmap.db.database import engine, create_database_if_not_exists

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory():
    url = make_url(str(engine.url))
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_tables(bind=None):
    """Create all tables defined in models."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("All tables created successfully")


def drop_all_tables(bind=None):
    """Drop all tables (useful for testing)."""
    logger.info("Dropping all database tables...")
    Base.metadata.drop_all(bind=bind or engine)
    logger.info("All tables dropped successfully")


def reset_database():
    """Drop and recreate all tables."""
    logger.info("Resetting database...")
    drop_all_tables()
    create_tables()
    logger.info("Database reset complete")


def init_database():
    """Complete database initialization."""
    logger.info("Initializing database...")
    _ensure_sqlite_directory()
    create_database_if_not_exists()
    create_tables()
    logger.info("Database initialization complete")


def check_connection() -> bool:
    """Run a trivial query against the configured database."""
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1"))
        return result.fetchone()[0] == 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
