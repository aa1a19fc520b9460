"""FastAPI dependencies for Todoboard routes."""

from __future__ import annotations

from fastapi import HTTPException, Request

from todoboard.obfuscator import DecodeError, IdObfuscator
from todoboard.store import ProjectStore


def get_store(request: Request) -> ProjectStore:
    """Get the project store from app state."""
    return request.app.state.store


def get_obfuscator(request: Request) -> IdObfuscator:
    """Get the id obfuscator from app state."""
    return request.app.state.obfuscator


def require_project_id(request: Request) -> int:
    """The project id decoded by the id filter.

    The filter lets bad tokens through; this is where they are
    rejected.
    """
    project_id = getattr(request.state, "project_id", None)
    if project_id is None:
        raise HTTPException(status_code=400, detail="missing or invalid project identifier")
    return project_id


def project_id_from_path(token: str, request: Request) -> int:
    """Decode the {token} path segment. An undecodable token names nothing: 404."""
    try:
        return get_obfuscator(request).decode(token)
    except DecodeError:
        raise HTTPException(status_code=404, detail="Project not found") from None
