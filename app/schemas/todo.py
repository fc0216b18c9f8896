"""Request/response schemas for to-do items. JSON uses camelCase; snake_case input is accepted too."""

import uuid
from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.todo import DESCRIPTION_MAX_LEN, TITLE_MAX_LEN


def _validate_title(value: str) -> str:
    """Reject titles that are blank once surrounding whitespace is removed."""
    if not value.strip():
        raise ValueError("Title must not be empty.")
    return value


Title = Annotated[
    str,
    Field(min_length=1, max_length=TITLE_MAX_LEN),
    AfterValidator(_validate_title),
]
Description = Annotated[str | None, Field(max_length=DESCRIPTION_MAX_LEN)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TodoCreate(_CamelModel):
    """Body for POST /todos."""

    title: Title
    description: Description = None


class TodoUpdate(_CamelModel):
    """Body for PUT /todos/{id}; every mutable field is overwritten."""

    title: Title
    description: Description = None
    is_done: bool = False


class TodoRead(_CamelModel):
    """A stored to-do item as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    is_done: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_is_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values; everything is stored as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


def parse_date_filter(value: str | None) -> datetime | None:
    """
    Parse the ?date= filter of GET /todos. Accepts ISO-8601 dates and date-times;
    naive values are UTC. Absent or empty means "use the default window".
    Raises ValueError when the value cannot be parsed.
    """
    if value is None or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith(("z", "Z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValueError(f"'{value}' is not a valid date or date-time.") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError as e:
        # e.g. 9999-12-31T23:59:59-01:00 has no UTC equivalent
        raise ValueError(f"'{value}' is out of the supported date range.") from e
