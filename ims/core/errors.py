import logging

from fastapi import HTTPException

logger = logging.getLogger(__name__)


class SessionStorageError(Exception):
    """Session payload could not be read from or written to durable storage."""


def http_error_from_supabase(exc: Exception) -> HTTPException:
    """Translate a Supabase/PostgREST error into an HTTPException"""
    if isinstance(exc, HTTPException):
        return exc

    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc)

    if code == "PGRST116":
        return HTTPException(status_code=404, detail="Resource not found")
    if code == "23505":
        return HTTPException(status_code=409, detail="Duplicate entry")
    if code == "42501" or "row-level security" in message:
        return HTTPException(status_code=403, detail="Access denied by security policy")
    if "JWT" in message:
        return HTTPException(status_code=401, detail="Invalid or expired token")

    logger.error(f"Database operation failed: {message}")
    return HTTPException(status_code=500, detail=message or "Database operation failed")
