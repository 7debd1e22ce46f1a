from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
import logging

from planmap.config import settings, get_db_components

logger = logging.getLogger(__name__)


def make_engine(database_url: str):
    """Create an engine; SQLite gets foreign keys switched on so cascades fire."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(database_url, pool_pre_ping=True)


def create_database_if_not_exists():
    """Create the PostgreSQL database if it doesn't exist (no-op for SQLite)."""
    db_components = get_db_components()
    if db_components["dialect"] != "postgresql":
        return
    db_name = db_components["db_name"]
    
    # Connect to default postgres database to check if our db exists
    conn = psycopg2.connect(db_components["db_url_without_name"])
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()
    
    # Check if database exists
    cursor.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (db_name,))
    exists = cursor.fetchone()
    
    if not exists:
        logger.info(f"Database '{db_name}' does not exist. Creating...")
        # Database names cannot be parameterized in PostgreSQL CREATE DATABASE
        cursor.execute(f'CREATE DATABASE "{db_name}"')
        logger.info(f"Database '{db_name}' created successfully")
    else:
        logger.info(f"Database '{db_name}' already exists")
        
    cursor.close()
    conn.close()

# Create SQLAlchemy engine
engine = make_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a database session dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
