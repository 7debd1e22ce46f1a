"""
Health check endpoints for the API.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from typing import Dict, Any
from datetime import datetime

from planmap.config import settings
from planmap.db.database import get_db

router = APIRouter()

@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status, version information and database reachability.
    """
    try:
        db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception as e:
        database = f"unhealthy: {e}"
    
    return {
        "status": "healthy" if database == "healthy" else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database,
    }
