"""To-do item CRUD endpoints. Every route requires the User role."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_role
from app.core.context import AppContext, get_context
from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationFailed
from app.models import RoleName, TodoItem
from app.schemas.auth import CurrentUser
from app.schemas.todo import TodoCreate, TodoRead, TodoUpdate, parse_date_filter
from app.services.task_store import TaskStore

router = APIRouter()

RequireUser = Annotated[CurrentUser, Depends(require_role(RoleName.USER))]


def get_task_store(db: Annotated[Session, Depends(get_db)]) -> TaskStore:
    return TaskStore(db)


def _parse_id(item_id: str) -> uuid.UUID:
    """A path id that is not a UUID cannot name an item, so it is a 404 rather than a 400."""
    try:
        return uuid.UUID(item_id)
    except ValueError:
        raise NotFoundError(item_id) from None


def _get_or_404(store: TaskStore, item_id: str) -> TodoItem:
    item = store.get_by_id(_parse_id(item_id))
    if item is None:
        raise NotFoundError(item_id)
    return item


@router.get("", response_model=list[TodoRead])
def list_todos(
    _user: RequireUser,
    store: Annotated[TaskStore, Depends(get_task_store)],
    date: Annotated[
        str | None,
        Query(description="Return items created at or after this ISO-8601 date/time (default: today, UTC)"),
    ] = None,
) -> list[TodoItem]:
    """List items created on or after date, newest first."""
    try:
        since = parse_date_filter(date)
    except ValueError as e:
        raise ValidationFailed({"date": [str(e)]}) from e
    return store.get_all(since)


@router.get("/{item_id}", response_model=TodoRead)
def get_todo(
    item_id: str,
    _user: RequireUser,
    store: Annotated[TaskStore, Depends(get_task_store)],
) -> TodoItem:
    return _get_or_404(store, item_id)


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED)
def create_todo(
    body: TodoCreate,
    response: Response,
    _user: RequireUser,
    store: Annotated[TaskStore, Depends(get_task_store)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> TodoItem:
    """Create an item; the Location header points at the new resource."""
    item = store.create(body.title, body.description)
    response.headers["Location"] = f"{ctx.settings.API_PREFIX}/todos/{item.id}"
    return item


@router.put("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_todo(
    item_id: str,
    body: TodoUpdate,
    _user: RequireUser,
    store: Annotated[TaskStore, Depends(get_task_store)],
) -> Response:
    """Overwrite title, description and isDone. id and createdAt never change."""
    if not store.update(_parse_id(item_id), body.title, body.description, body.is_done):
        raise NotFoundError(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    item_id: str,
    _user: RequireUser,
    store: Annotated[TaskStore, Depends(get_task_store)],
) -> Response:
    if not store.delete(_parse_id(item_id)):
        raise NotFoundError(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
