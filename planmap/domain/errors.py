"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations


class DomainError(Exception):
    """Base for all domain errors."""

    status_code = 500


class UnauthorizedError(DomainError):
    """No session or an invalid one."""

    status_code = 401


class ForbiddenError(DomainError):
    """Session is valid but the resource belongs to someone else."""

    status_code = 403


class NotFoundError(DomainError):
    """Resource not found (or not owned by the caller)."""

    status_code = 404


class ValidationError(DomainError):
    """Invalid input or state."""

    status_code = 400


class ConflictError(DomainError):
    """Resource conflict (e.g., duplicate e-mail)."""

    status_code = 409


class ServerError(DomainError):
    """Persistence failure."""

    status_code = 500
