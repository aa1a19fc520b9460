"""Tests for the in-memory project store and the role table."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from todoboard.errors import AccessDeniedError, ConflictError, InvalidOperationError, NotFoundError
from todoboard.models import BoardCreate, BoardUpdate, ProjectCreate, ProjectUpdate
from todoboard.permissions import Permission, Role, default_permissions
from todoboard.store import ProjectStore


@pytest.fixture
def store():
    return ProjectStore()


class TestPermissions:
    def test_owner_has_everything(self):
        assert all(default_permissions(Role.OWNER).values())

    def test_admin_cannot_delete(self):
        perms = default_permissions("admin")
        assert perms["can_delete_project"] is False
        assert perms["can_manage_boards"] is True

    def test_viewer_has_nothing(self):
        assert not any(default_permissions(Role.VIEWER).values())

    def test_unknown_role_is_viewer(self):
        assert default_permissions("superuser") == default_permissions(Role.VIEWER)

    def test_table_names_every_permission(self):
        assert set(default_permissions(Role.MEMBER)) == {p.value for p in Permission}


class TestStore:
    def test_ids_are_sequential(self, store):
        a = store.create_project(ProjectCreate(name="a"), 1)
        b = store.create_project(ProjectCreate(name="b"), 1)
        assert (a.id, b.id) == (1, 2)

    def test_returned_copies_are_detached(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        p.name = "changed"
        p.members.clear()
        assert store.get_project(p.id, 1).name == "a"

    def test_membership_checks(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        store.add_member(p.id, 2, Role.VIEWER, 1)
        assert store.is_member(p.id, 2)
        assert not store.is_member(p.id, 3)
        assert not store.is_member(99, 1)
        assert store.has_permission(p.id, 1, Permission.DELETE_PROJECT)
        assert not store.has_permission(p.id, 2, Permission.CREATE_TASKS)
        assert not store.has_permission(99, 1, Permission.EDIT_PROJECT)

    def test_errors(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        with pytest.raises(NotFoundError):
            store.get_project(42, 1)
        with pytest.raises(AccessDeniedError):
            store.get_project(p.id, 2)
        store.add_member(p.id, 2, Role.MEMBER, 1)
        with pytest.raises(ConflictError):
            store.add_member(p.id, 2, Role.ADMIN, 1)
        with pytest.raises(InvalidOperationError):
            store.remove_member(p.id, 1, 1)
        with pytest.raises(AccessDeniedError):
            store.create_board(p.id, BoardCreate(name="b"), 2)

    def test_board_order_appends(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        orders = [store.create_board(p.id, BoardCreate(name=n), 1).order for n in "xyz"]
        assert orders == [0, 1, 2]

    def test_concurrent_creates_get_unique_ids(self, store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            projects = list(pool.map(
                lambda i: store.create_project(ProjectCreate(name=f"p{i}"), 1), range(100)
            ))
        assert sorted(p.id for p in projects) == list(range(1, 101))


class TestSearch:
    def test_matches_name_or_description_case_insensitively(self, store):
        store.create_project(ProjectCreate(name="Weekly Shopping"), 1)
        store.create_project(ProjectCreate(name="Home", description="fix the SHOP door"), 1)
        store.create_project(ProjectCreate(name="Shop floor"), 2)
        assert {p.name for p in store.search_projects(1, "shop")} == {"Weekly Shopping", "Home"}

    def test_most_recent_activity_first(self, store):
        a = store.create_project(ProjectCreate(name="list a"), 1)
        store.create_project(ProjectCreate(name="list b"), 1)
        store.update_project(a.id, ProjectUpdate(color="#000000"), 1)
        assert [p.name for p in store.search_projects(1, "list")] == ["list a", "list b"]


class TestBoardLifecycle:
    def test_update_keeps_unset_fields(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        b = store.create_board(p.id, BoardCreate(name="x", color="#123456"), 1)
        updated = store.update_board(p.id, b.id, BoardUpdate(name="y"), 1)
        assert (updated.name, updated.color) == ("y", "#123456")
        assert store.get_board(b.id, 1).name == "y"

    def test_board_must_belong_to_project(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        q = store.create_project(ProjectCreate(name="b"), 1)
        b = store.create_board(p.id, BoardCreate(name="x"), 1)
        with pytest.raises(NotFoundError):
            store.update_board(q.id, b.id, BoardUpdate(name="y"), 1)
        with pytest.raises(NotFoundError):
            store.delete_board(q.id, b.id, 1)

    def test_delete_renumbers(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        boards = [store.create_board(p.id, BoardCreate(name=n), 1) for n in "xyz"]
        store.delete_board(p.id, boards[0].id, 1)
        assert [(b.name, b.order) for b in store.list_boards(p.id, 1)] == [("y", 0), ("z", 1)]
        with pytest.raises(NotFoundError):
            store.get_board(boards[0].id, 1)

    def test_get_requires_membership(self, store):
        p = store.create_project(ProjectCreate(name="a"), 1)
        b = store.create_board(p.id, BoardCreate(name="x"), 1)
        with pytest.raises(AccessDeniedError):
            store.get_board(b.id, 2)
