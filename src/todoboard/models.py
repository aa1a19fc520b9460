"""Pydantic models for projects, members and boards."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from todoboard.permissions import Role, default_permissions


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Member(BaseModel):
    user_id: int
    role: Role
    permissions: dict[str, bool] = Field(default_factory=dict)
    joined_at: datetime = Field(default_factory=_now)

    @classmethod
    def for_role(cls, user_id: int, role: Role) -> Member:
        return cls(user_id=user_id, role=role, permissions=default_permissions(role))


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    color: str = "#1890ff"
    icon: str = "folder"
    is_private: bool = False


class ProjectUpdate(BaseModel):
    """Partial update. Omitted fields stay as they are; only description
    may be cleared with null."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = None
    icon: str | None = None
    is_private: bool | None = None

    @field_validator("name", "color", "icon", "is_private")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class Project(ProjectCreate):
    id: int
    is_archived: bool = False
    members: list[Member] = Field(default_factory=list)
    created_by: int
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    last_activity: datetime = Field(default_factory=_now)

    def member(self, user_id: int) -> Member | None:
        for m in self.members:
            if m.user_id == user_id:
                return m
        return None


class MemberAdd(BaseModel):
    user_id: int = Field(gt=0)
    role: Role = Role.MEMBER


class BoardCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    color: str = "#f0f0f0"


class Board(BoardCreate):
    id: int
    project_id: int
    order: int
    created_by: int
    created_at: datetime = Field(default_factory=_now)


class BoardOrder(BaseModel):
    board_ids: list[int]


class BoardUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=200)
    color: str | None = None

    @field_validator("name", "color")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
