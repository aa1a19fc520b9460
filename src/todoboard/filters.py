"""Request filter that turns an obfuscated query parameter into an id.

The filter is fail-open: a bad token is logged and the request goes
on without the decoded field. Handlers that need the id depend on
deps.require_project_id, which turns the missing field into a 400.
"""

from __future__ import annotations

import logging

from fastapi import Request

from todoboard.deps import get_obfuscator
from todoboard.obfuscator import DecodeError

logger = logging.getLogger("todoboard.filters")

DEFAULT_PARAM = "encryptedProjectId"
DEFAULT_FIELD = "project_id"


def make_id_filter(param: str | None = None, field: str = DEFAULT_FIELD):
    """Return a FastAPI dependency that decodes ``param`` into request.state.

    Install it on a router with ``dependencies=[Depends(...)]``. When
    param is None the name comes from the app config (id_param).
    """

    async def decode_id_param(request: Request) -> None:
        config = getattr(request.app.state, "config", None)
        name = param or getattr(config, "id_param", DEFAULT_PARAM)
        token = request.query_params.get(name)
        if not token:
            return
        try:
            setattr(request.state, field, get_obfuscator(request).decode(token))
        except Exception as exc:
            # fail-open; require_project_id rejects the missing field
            logger.warning(
                "Could not decode %s on %s %s: %s",
                name,
                request.method,
                request.url.path,
                exc.reason if isinstance(exc, DecodeError) else repr(exc),
            )

    return decode_id_param
