"""Project endpoints — projects are addressed by obfuscated tokens.

Every project in a response carries a fresh ``token``. Clients put
that token in URLs instead of the integer id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from todoboard.auth import get_current_user_id
from todoboard.deps import get_obfuscator, get_store, project_id_from_path
from todoboard.models import MemberAdd, Project, ProjectCreate, ProjectUpdate
from todoboard.obfuscator import IdObfuscator
from todoboard.store import ProjectStore

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def _dump(project: Project, obfuscator: IdObfuscator) -> dict:
    data = project.model_dump(mode="json")
    data["token"] = obfuscator.encode(project.id)
    return data


@router.post("", status_code=201)
def create_project(
    data: ProjectCreate,
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.create_project(data, user_id), obfuscator)


@router.get("")
def list_projects(
    include_archived: bool = Query(False),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    projects = store.list_projects(user_id, include_archived=include_archived)
    return [_dump(p, obfuscator) for p in projects]


@router.get("/search")
def search_projects(
    q: str = Query(..., min_length=1),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return [_dump(p, obfuscator) for p in store.search_projects(user_id, q)]


@router.get("/{token}")
def get_project(
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.get_project(project_id, user_id), obfuscator)


@router.put("/{token}")
def update_project(
    data: ProjectUpdate,
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.update_project(project_id, data, user_id), obfuscator)


@router.delete("/{token}", status_code=204)
def delete_project(
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    store.delete_project(project_id, user_id)


@router.put("/{token}/archive")
def archive_project(
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.set_archived(project_id, True, user_id), obfuscator)


@router.put("/{token}/unarchive")
def unarchive_project(
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.set_archived(project_id, False, user_id), obfuscator)


@router.post("/{token}/members", status_code=201)
def add_member(
    member: MemberAdd,
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    project = store.add_member(project_id, member.user_id, member.role, user_id)
    return _dump(project, obfuscator)


@router.delete("/{token}/members/{member_id}")
def remove_member(
    member_id: int,
    project_id: int = Depends(project_id_from_path),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
    obfuscator: IdObfuscator = Depends(get_obfuscator),
):
    return _dump(store.remove_member(project_id, member_id, user_id), obfuscator)
