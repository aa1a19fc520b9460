"""Service key and caller identity for the Todoboard routes.

The service key guards every router. An empty configured key turns
the check off, for local development. Callers send the key in
X-API-Key.

The caller's user id arrives in X-User-Id, set by whatever sits in
front of the service and authenticates users. Project permissions
are checked against that id, never against a project token.
"""

from __future__ import annotations

import secrets

from fastapi import Header, HTTPException, Security
from fastapi.security import APIKeyHeader

_service_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def make_api_key_checker(service_key: str):
    """Dependency enforcing the service key; a no-op when it is empty."""

    async def check_service_key(
        presented: str | None = Security(_service_key_header),
    ) -> None:
        if service_key and not (
            presented is not None
            and secrets.compare_digest(presented.encode(), service_key.encode())
        ):
            raise HTTPException(status_code=401, detail="Invalid or missing API key")

    return check_service_key


async def get_current_user_id(
    x_user_id: str | None = Header(default=None),
) -> int:
    """The authenticated caller. Missing, non-numeric or oversized -> 401."""
    try:
        user_id = int(x_user_id) if x_user_id and x_user_id.isdecimal() else 0
    except ValueError:
        # past the int() digit limit
        user_id = 0
    if user_id <= 0:
        raise HTTPException(status_code=401, detail="Missing or invalid user identity")
    return user_id
