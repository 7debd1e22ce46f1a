"""
PlanMap Application Package

Directory Structure:
├── routers/           # FastAPI route handlers
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Use cases: ownership checks, validation, events
├── domain/            # Errors, events, progress rules and defaults
├── db/                # SQLAlchemy models, engine and repositories
├── auth/              # Password hashing and bearer tokens
├── client/            # Async client: query cache, autosave, editor session
└── config.py          # Application configuration

The server stores mindmaps, their nodes and the edges between them per user.
The client package talks to it over HTTP and keeps a local cache in sync
with optimistic updates that roll back when the server refuses a change.
"""
