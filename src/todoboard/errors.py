"""Domain errors raised by the project store.

Each maps to one HTTP status in app.create_app.
"""

from __future__ import annotations


class TodoboardError(Exception):
    """Base for all store errors. Unmapped subclasses surface as 500."""


class NotFoundError(TodoboardError):
    """The project, board or member does not exist."""


class AccessDeniedError(TodoboardError):
    """The caller is not a member, or lacks the permission."""


class ConflictError(TodoboardError):
    """The change collides with existing state (e.g. already a member)."""


class InvalidOperationError(TodoboardError):
    """The request is well-formed but not allowed (e.g. removing the owner)."""
