"""Todoboard — FastAPI application.

Projects and boards for a collaborative to-do list. Project ids
never appear raw in URLs; clients see obfuscated tokens.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from todoboard.auth import make_api_key_checker
from todoboard.config import TodoboardConfig, load_config
from todoboard.errors import (
    AccessDeniedError,
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    TodoboardError,
)
from todoboard.obfuscator import IdObfuscator
from todoboard.routes import boards, meta, projects
from todoboard.store import ProjectStore

logger = logging.getLogger("todoboard")
audit_logger = logging.getLogger("todoboard.audit")

_ERROR_STATUS: dict[type[TodoboardError], int] = {
    NotFoundError: 404,
    AccessDeniedError: 403,
    ConflictError: 409,
    InvalidOperationError: 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: TodoboardConfig = app.state.config
    logger.info(
        "Todoboard ready (strict_decode=%s, urlsafe_tokens=%s, id_param=%s)",
        config.strict_decode,
        config.urlsafe_tokens,
        config.id_param,
    )
    yield
    logger.info("Todoboard shut down")


def create_app(
    config: TodoboardConfig | None = None,
    store: ProjectStore | None = None,
    obfuscator: IdObfuscator | None = None,
) -> FastAPI:
    """Application factory.

    The store and obfuscator are built here, once, and reach the
    routes through app.state. Tests pass their own.
    """
    if config is None:
        config = load_config()

    app = FastAPI(
        title="Todoboard",
        description="Projects and boards with opaque project identifiers",
        version=meta.VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store or ProjectStore()
    app.state.obfuscator = obfuscator or IdObfuscator(
        strict=config.strict_decode,
        urlsafe=config.urlsafe_tokens,
    )

    check_key = make_api_key_checker(config.api_key)

    # ── Exception handlers ────────────────────────────────────

    async def store_error_handler(request: Request, exc: TodoboardError):
        status = next((code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)), 500)
        if status == 500:
            logger.error("Unhandled store error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    app.add_exception_handler(TodoboardError, store_error_handler)

    # ── Audit middleware ──────────────────────────────────────

    @app.middleware("http")
    async def audit_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        # project is set only when the id filter decoded a token
        audit_logger.info(
            "%s %s %d %.3fs user=%s project=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            request.headers.get("x-user-id", "-"),
            getattr(request.state, "project_id", "-"),
        )
        return response

    # ── Routers ───────────────────────────────────────────────

    app.include_router(meta.router, dependencies=[Depends(check_key)])
    app.include_router(projects.router, dependencies=[Depends(check_key)])
    app.include_router(boards.router, dependencies=[Depends(check_key)])

    return app
