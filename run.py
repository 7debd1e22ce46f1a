import logging

import uvicorn
from planmap.config import settings

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    # Start the API server
    print(f"Starting PlanMap API on {settings.API_HOST}:{settings.API_PORT}...")
    uvicorn.run(
        "planmap.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD
    )
