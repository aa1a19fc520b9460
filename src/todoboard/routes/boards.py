"""Board endpoints — the owning project comes from ?encryptedProjectId=.

The router runs the id filter first; handlers read the decoded id
through require_project_id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from todoboard.auth import get_current_user_id
from todoboard.deps import get_store, require_project_id
from todoboard.filters import make_id_filter
from todoboard.models import BoardCreate, BoardOrder, BoardUpdate
from todoboard.store import ProjectStore

router = APIRouter(
    prefix="/api/v1/boards",
    tags=["boards"],
    dependencies=[Depends(make_id_filter())],
)


@router.post("", status_code=201)
def create_board(
    data: BoardCreate,
    project_id: int = Depends(require_project_id),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    board = store.create_board(project_id, data, user_id)
    return board.model_dump(mode="json")


@router.get("")
def list_boards(
    project_id: int = Depends(require_project_id),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    return [b.model_dump(mode="json") for b in store.list_boards(project_id, user_id)]


@router.post("/reorder")
def reorder_boards(
    order: BoardOrder,
    project_id: int = Depends(require_project_id),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    boards = store.reorder_boards(project_id, order.board_ids, user_id)
    return [b.model_dump(mode="json") for b in boards]


@router.get("/{board_id}")
def get_board(
    board_id: int,
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    return store.get_board(board_id, user_id).model_dump(mode="json")


@router.put("/{board_id}")
def update_board(
    board_id: int,
    data: BoardUpdate,
    project_id: int = Depends(require_project_id),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    return store.update_board(project_id, board_id, data, user_id).model_dump(mode="json")


@router.delete("/{board_id}", status_code=204)
def delete_board(
    board_id: int,
    project_id: int = Depends(require_project_id),
    user_id: int = Depends(get_current_user_id),
    store: ProjectStore = Depends(get_store),
):
    store.delete_board(project_id, board_id, user_id)
