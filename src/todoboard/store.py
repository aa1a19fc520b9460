"""In-memory project store.

Holds projects and their boards, and enforces the membership rules:
every read needs membership, every write needs the matching
permission from the member's role. Ids are sequential integers
starting at 1; they only leave the service as obfuscated tokens.

One store is built at startup and handed to the app through
app.state. Sync route handlers run in a threadpool, so all access
goes through a single lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from todoboard.errors import (
    AccessDeniedError,
    ConflictError,
    InvalidOperationError,
    NotFoundError,
)
from todoboard.models import (
    Board,
    BoardCreate,
    BoardUpdate,
    Member,
    Project,
    ProjectCreate,
    ProjectUpdate,
)
from todoboard.permissions import Permission, Role

logger = logging.getLogger("todoboard.store")


class ProjectStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._projects: dict[int, Project] = {}
        self._boards: dict[int, Board] = {}
        self._next_project_id = 1
        self._next_board_id = 1

    # ── Internal helpers (caller holds the lock) ─────────────

    def _project(self, project_id: int) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    def _require_member(self, project: Project, user_id: int) -> Member:
        member = project.member(user_id)
        if member is None:
            raise AccessDeniedError(f"User {user_id} is not a member of project {project.id}")
        return member

    def _require(self, project: Project, user_id: int, permission: Permission) -> None:
        member = self._require_member(project, user_id)
        if not member.permissions.get(permission.value, False):
            raise AccessDeniedError(
                f"User {user_id} lacks {permission.value} on project {project.id}"
            )

    def _touch(self, project: Project) -> None:
        now = datetime.now(timezone.utc)
        project.updated_at = now
        project.last_activity = now

    # ── Projects ──────────────────────────────────────────────

    def create_project(self, data: ProjectCreate, user_id: int) -> Project:
        with self._lock:
            project = Project(
                id=self._next_project_id,
                created_by=user_id,
                members=[Member.for_role(user_id, Role.OWNER)],
                **data.model_dump(),
            )
            self._projects[project.id] = project
            self._next_project_id += 1
        logger.info("User %d created project %d: %s", user_id, project.id, project.name)
        return project.model_copy(deep=True)

    def get_project(self, project_id: int, user_id: int) -> Project:
        with self._lock:
            project = self._project(project_id)
            self._require_member(project, user_id)
            return project.model_copy(deep=True)

    def list_projects(self, user_id: int, include_archived: bool = False) -> list[Project]:
        with self._lock:
            return [
                p.model_copy(deep=True)
                for p in self._projects.values()
                if p.member(user_id) is not None and (include_archived or not p.is_archived)
            ]

    def search_projects(self, user_id: int, query: str) -> list[Project]:
        """Unarchived projects of the user whose name or description contains query.

        Case-insensitive. Most recently active first.
        """
        needle = query.casefold()
        with self._lock:
            hits = [
                p
                for p in self._projects.values()
                if p.member(user_id) is not None
                and not p.is_archived
                and (needle in p.name.casefold() or needle in (p.description or "").casefold())
            ]
            hits.sort(key=lambda p: (p.last_activity, p.id), reverse=True)
            return [p.model_copy(deep=True) for p in hits]

    def update_project(self, project_id: int, data: ProjectUpdate, user_id: int) -> Project:
        with self._lock:
            project = self._project(project_id)
            self._require(project, user_id, Permission.EDIT_PROJECT)
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(project, key, value)
            self._touch(project)
            result = project.model_copy(deep=True)
        logger.info("User %d updated project %d", user_id, project_id)
        return result

    def set_archived(self, project_id: int, archived: bool, user_id: int) -> Project:
        with self._lock:
            project = self._project(project_id)
            self._require(project, user_id, Permission.EDIT_PROJECT)
            project.is_archived = archived
            self._touch(project)
            result = project.model_copy(deep=True)
        logger.info(
            "User %d %s project %d",
            user_id,
            "archived" if archived else "unarchived",
            project_id,
        )
        return result

    def delete_project(self, project_id: int, user_id: int) -> None:
        with self._lock:
            project = self._project(project_id)
            self._require(project, user_id, Permission.DELETE_PROJECT)
            del self._projects[project_id]
            for board_id in [b.id for b in self._boards.values() if b.project_id == project_id]:
                del self._boards[board_id]
        logger.info("User %d deleted project %d", user_id, project_id)

    # ── Membership ────────────────────────────────────────────

    def is_member(self, project_id: int, user_id: int) -> bool:
        with self._lock:
            project = self._projects.get(project_id)
            return project is not None and project.member(user_id) is not None

    def has_permission(self, project_id: int, user_id: int, permission: Permission) -> bool:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                return False
            member = project.member(user_id)
            return member is not None and member.permissions.get(permission.value, False)

    def add_member(self, project_id: int, user_id: int, role: Role, actor_id: int) -> Project:
        with self._lock:
            project = self._project(project_id)
            self._require(project, actor_id, Permission.MANAGE_MEMBERS)
            if role is Role.OWNER:
                raise InvalidOperationError("A project has exactly one owner")
            if project.member(user_id) is not None:
                raise ConflictError(f"User {user_id} is already a member of project {project_id}")
            project.members.append(Member.for_role(user_id, role))
            self._touch(project)
            result = project.model_copy(deep=True)
        logger.info(
            "User %d added user %d to project %d as %s",
            actor_id,
            user_id,
            project_id,
            role.value,
        )
        return result

    def remove_member(self, project_id: int, user_id: int, actor_id: int) -> Project:
        with self._lock:
            project = self._project(project_id)
            self._require(project, actor_id, Permission.MANAGE_MEMBERS)
            member = project.member(user_id)
            if member is None:
                raise NotFoundError(f"User {user_id} is not a member of project {project_id}")
            if member.role is Role.OWNER:
                raise InvalidOperationError("Cannot remove the project owner")
            project.members.remove(member)
            self._touch(project)
            result = project.model_copy(deep=True)
        logger.info("User %d removed user %d from project %d", actor_id, user_id, project_id)
        return result

    # ── Boards ────────────────────────────────────────────────

    def _project_boards(self, project_id: int) -> list[Board]:
        return sorted(
            (b for b in self._boards.values() if b.project_id == project_id),
            key=lambda b: b.order,
        )

    def create_board(self, project_id: int, data: BoardCreate, user_id: int) -> Board:
        with self._lock:
            project = self._project(project_id)
            self._require(project, user_id, Permission.MANAGE_BOARDS)
            board = Board(
                id=self._next_board_id,
                project_id=project_id,
                order=len(self._project_boards(project_id)),
                created_by=user_id,
                **data.model_dump(),
            )
            self._boards[board.id] = board
            self._next_board_id += 1
            self._touch(project)
        logger.info("User %d created board %d in project %d", user_id, board.id, project_id)
        return board.model_copy()

    def list_boards(self, project_id: int, user_id: int) -> list[Board]:
        with self._lock:
            project = self._project(project_id)
            self._require_member(project, user_id)
            return [b.model_copy() for b in self._project_boards(project_id)]

    def _board(self, board_id: int, project_id: int | None = None) -> Board:
        board = self._boards.get(board_id)
        if board is None or (project_id is not None and board.project_id != project_id):
            raise NotFoundError(f"Board {board_id} not found")
        return board

    def get_board(self, board_id: int, user_id: int) -> Board:
        with self._lock:
            board = self._board(board_id)
            self._require_member(self._project(board.project_id), user_id)
            return board.model_copy()

    def update_board(
        self, project_id: int, board_id: int, data: BoardUpdate, user_id: int
    ) -> Board:
        """Change a board of project_id. A board of another project is not found."""
        with self._lock:
            project = self._project(project_id)
            board = self._board(board_id, project_id)
            self._require(project, user_id, Permission.MANAGE_BOARDS)
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(board, key, value)
            self._touch(project)
            result = board.model_copy()
        logger.info("User %d updated board %d in project %d", user_id, board_id, project_id)
        return result

    def delete_board(self, project_id: int, board_id: int, user_id: int) -> None:
        """Remove a board and close the gap in the order of the rest."""
        with self._lock:
            project = self._project(project_id)
            self._board(board_id, project_id)
            self._require(project, user_id, Permission.MANAGE_BOARDS)
            del self._boards[board_id]
            for position, board in enumerate(self._project_boards(project_id)):
                board.order = position
            self._touch(project)
        logger.info("User %d deleted board %d from project %d", user_id, board_id, project_id)

    def reorder_boards(self, project_id: int, board_ids: list[int], user_id: int) -> list[Board]:
        """Set board order to the position of each id in board_ids.

        board_ids must name every board of the project exactly once.
        """
        with self._lock:
            project = self._project(project_id)
            self._require(project, user_id, Permission.MANAGE_BOARDS)
            current = {b.id for b in self._project_boards(project_id)}
            if len(board_ids) != len(set(board_ids)) or set(board_ids) != current:
                raise InvalidOperationError(
                    "Board order must list every board of the project exactly once"
                )
            for position, board_id in enumerate(board_ids):
                self._boards[board_id].order = position
            self._touch(project)
            return [b.model_copy() for b in self._project_boards(project_id)]

    # ── Meta ──────────────────────────────────────────────────

    def count_records(self) -> dict[str, int]:
        with self._lock:
            return {"projects": len(self._projects), "boards": len(self._boards)}
