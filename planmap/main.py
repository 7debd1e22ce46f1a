import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from planmap.config import settings
from planmap.routers import auth, mindmaps, nodes, edges, health
from planmap.domain.errors import DomainError
from planmap.application.event_handlers import register_event_handlers
from planmap.db.init_db import init_database

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PlanMap API",
    description="Study mind maps: mindmaps, nodes with progress, and edges",
    version=settings.VERSION,
)

# Register domain event handlers and make sure tables exist on startup
@app.on_event("startup")
async def startup_event():
    register_event_handlers()
    init_database()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


# Domain error handlers
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc.orig) if getattr(exc, "orig", None) else str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# Include routers
app.include_router(health.router, tags=["Health"])  # Health check endpoints first
app.include_router(auth.router, tags=["Auth"])
app.include_router(mindmaps.router, tags=["Mindmaps"])
app.include_router(nodes.router, tags=["Nodes"])
app.include_router(edges.router, tags=["Edges"])

@app.get("/")
async def root():
    return {"message": "Welcome to PlanMap API. See /docs for API documentation"}
