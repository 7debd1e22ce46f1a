from pydantic_settings import BaseSettings
from pathlib import Path
from sqlalchemy.engine import make_url

# Get the repository root directory (parent of planmap directory)
REPO_ROOT = Path(__file__).parent.parent.absolute()

class Settings(BaseSettings):
    """Application settings."""
    
    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = True
    
    # Version and environment
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Database settings ("sqlite:///..." or "postgresql://...")
    DATABASE_URL: str = f"sqlite:///{REPO_ROOT / 'storage' / 'planmap.db'}"
    
    # Session tokens
    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    
    # Autosave settings (client sync layer)
    AUTOSAVE_MODE: str = "debounce"  # "debounce" or "interval"
    AUTOSAVE_DEBOUNCE_MS: int = 1000
    AUTOSAVE_INTERVAL_MS: int = 5 * 60 * 1000
    CONTENT_AUTOSAVE_DEBOUNCE_MS: int = 1000
    VIEWPORT_DEBOUNCE_MS: int = 2000
    VIEWPORT_POLL_MS: int = 500
    LOCAL_STORAGE_DIR: str = str(REPO_ROOT / "storage" / "local")
    
    class Config:
        env_file = ".env"

settings = Settings()


def get_db_components(database_url: str | None = None) -> dict:
    """Split the database URL into the pieces needed to bootstrap PostgreSQL."""
    url = make_url(database_url or settings.DATABASE_URL)
    return {
        "db_url": url.render_as_string(hide_password=False),
        "db_name": url.database,
        "db_url_without_name": url.set(database="postgres").render_as_string(hide_password=False),
        "dialect": url.get_backend_name(),
    }
