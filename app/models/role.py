"""ORM models for roles and user-role assignments."""

import enum
import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import IdentityBase


class RoleName(str, enum.Enum):
    """Fixed role set, seeded at startup; never created through the API."""

    USER = "User"
    ADMIN = "Admin"


class Role(IdentityBase):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False, unique=True, index=True)

    user_roles = relationship("UserRole", back_populates="role")


class UserRole(IdentityBase):
    """Assignment of a role to a user; the composite key forbids duplicates."""

    __tablename__ = "user_roles"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)

    user = relationship("User", back_populates="user_roles")
    role = relationship("Role", back_populates="user_roles")


class RoleClaim(IdentityBase):
    __tablename__ = "role_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    claim_type = Column(Text, nullable=True)
    claim_value = Column(Text, nullable=True)
