"""Project roles and the permission each role grants."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class Permission(str, Enum):
    EDIT_PROJECT = "can_edit_project"
    DELETE_PROJECT = "can_delete_project"
    MANAGE_MEMBERS = "can_manage_members"
    CREATE_TASKS = "can_create_tasks"
    EDIT_TASKS = "can_edit_tasks"
    DELETE_TASKS = "can_delete_tasks"
    MANAGE_BOARDS = "can_manage_boards"


_ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.OWNER: frozenset(Permission),
    Role.ADMIN: frozenset(Permission) - {Permission.DELETE_PROJECT},
    Role.MEMBER: frozenset({Permission.CREATE_TASKS, Permission.EDIT_TASKS}),
    Role.VIEWER: frozenset(),
}


def default_permissions(role: Role | str) -> dict[str, bool]:
    """Full permission map for a role. Unknown roles get viewer rights."""
    try:
        granted = _ROLE_PERMISSIONS[Role(role)]
    except ValueError:
        granted = _ROLE_PERMISSIONS[Role.VIEWER]
    return {p.value: p in granted for p in Permission}
