"""Persistence for to-do items: create, filtered listing, lookup, update and delete."""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.models import TodoItem

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


def start_of_utc_day(moment: datetime) -> datetime:
    """Midnight UTC of the day containing moment."""
    return as_utc(moment).replace(hour=0, minute=0, second=0, microsecond=0)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class TaskStore:
    """
    Repository for TodoItem rows on one application-data session.

    Updates and deletes are single statements filtered by primary key, so a
    concurrent update and delete on the same id resolve in the database: the
    later write wins, or the loser sees "not found".
    """

    def __init__(self, session: Session, now: Callable[[], datetime] = utc_now) -> None:
        self.session = session
        self._now = now

    def create(self, title: str, description: str | None) -> TodoItem:
        item = TodoItem(
            id=uuid.uuid4(),
            title=title,
            description=description,
            is_done=False,
            created_at=as_utc(self._now()),
        )
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        logger.info("Todo item created: id=%s", item.id)
        return item

    def get_all(self, since: datetime | None = None) -> list[TodoItem]:
        """Items created at or after since (default: start of today, UTC), newest first."""
        cutoff = as_utc(since) if since is not None else start_of_utc_day(self._now())
        return (
            self.session.query(TodoItem)
            .filter(TodoItem.created_at >= cutoff)
            .order_by(TodoItem.created_at.desc())
            .all()
        )

    def get_by_id(self, item_id: uuid.UUID) -> TodoItem | None:
        return self.session.get(TodoItem, item_id)

    def update(
        self,
        item_id: uuid.UUID,
        title: str,
        description: str | None,
        is_done: bool,
    ) -> bool:
        """Overwrite the mutable fields. Returns False when no item has this id."""
        updated = (
            self.session.query(TodoItem)
            .filter(TodoItem.id == item_id)
            .update(
                {
                    TodoItem.title: title,
                    TodoItem.description: description,
                    TodoItem.is_done: is_done,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        if updated:
            logger.info("Todo item updated: id=%s is_done=%s", item_id, is_done)
        return updated > 0

    def delete(self, item_id: uuid.UUID) -> bool:
        """Remove the item. Returns False when no item has this id."""
        deleted = (
            self.session.query(TodoItem)
            .filter(TodoItem.id == item_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        if deleted:
            logger.info("Todo item deleted: id=%s", item_id)
        return deleted > 0
