"""Meta endpoints — health, version, record counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from todoboard.deps import get_store
from todoboard.store import ProjectStore

router = APIRouter(prefix="/api/v1", tags=["meta"])

VERSION = "0.1.0"


@router.get("/health")
def health():
    return {"status": "ok", "service": "todoboard"}


@router.get("/version")
def version():
    return {"service": VERSION}


@router.get("/counts")
def counts(store: ProjectStore = Depends(get_store)):
    return store.count_records()
