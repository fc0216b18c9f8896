"""SQLAlchemy declarative bases, one per store."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for application data (todo items)."""

    pass


class IdentityBase(DeclarativeBase):
    """Declarative base for identity data (users, roles, assignments)."""

    pass
