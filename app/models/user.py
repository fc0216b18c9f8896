"""ORM models for user accounts and their bookkeeping tables."""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.models.base import IdentityBase


class User(IdentityBase):
    """
    User account for JWT authentication and role-based access control.

    Email is unique and is the login identifier; username is display only.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(256), nullable=False)
    email = Column(String(256), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    user_roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
    )


# Claim, external-login and token tables complete the identity schema; nothing in
# this service reads or writes them yet.


class UserClaim(IdentityBase):
    __tablename__ = "user_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    claim_type = Column(Text, nullable=True)
    claim_value = Column(Text, nullable=True)


class UserLogin(IdentityBase):
    __tablename__ = "user_logins"

    login_provider = Column(String(128), primary_key=True)
    provider_key = Column(String(128), primary_key=True)
    provider_display_name = Column(Text, nullable=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class UserToken(IdentityBase):
    __tablename__ = "user_tokens"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    login_provider = Column(String(128), primary_key=True)
    name = Column(String(128), primary_key=True)
    value = Column(Text, nullable=True)
