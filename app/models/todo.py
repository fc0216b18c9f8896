"""ORM model for persisted to-do items."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid

from app.models.base import Base

TITLE_MAX_LEN = 200
DESCRIPTION_MAX_LEN = 2000


class TodoItem(Base):
    """
    A to-do item. id and created_at are set server-side on create and never change.

    Items have no owner column; any caller with the User role may read or change them.
    """

    __tablename__ = "todo_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LEN), nullable=True)
    is_done = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
