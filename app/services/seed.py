"""Startup seeding of the fixed roles and, on an empty store, the default accounts."""

import logging
import secrets
import sys
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.models import Base, IdentityBase, Role, RoleName
from app.services.credential_store import CredentialStore

if TYPE_CHECKING:
    from app.core.context import AppContext

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS: tuple[tuple[str, str, tuple[RoleName, ...]], ...] = (
    ("User", "user@todo.dev", (RoleName.USER,)),
    ("Admin", "admin@todo.dev", (RoleName.ADMIN, RoleName.USER)),
)


def ensure_roles(session: Session) -> int:
    """Create any missing role from RoleName. Returns how many were created."""
    existing = {name for (name,) in session.query(Role.name).all()}
    missing = [role for role in RoleName if role.value not in existing]
    for role in missing:
        session.add(Role(name=role.value))
    if missing:
        session.commit()
    return len(missing)


def _seed_password(settings: Settings) -> str:
    if settings.APP_ENV == "dev":
        return settings.DEFAULT_USER_PASSWORD.get_secret_value()
    # Never ship a well-known password outside dev. The suffix keeps the policy satisfied.
    return secrets.token_urlsafe(24) + "aA1!"


def seed_identity(session: Session, settings: Settings) -> list[str]:
    """
    Ensure roles exist; if there are no users and seeding is enabled, create the
    default User and Admin accounts. Returns the usernames created.
    """
    created_roles = ensure_roles(session)
    if created_roles:
        logger.info("Seeded roles: count=%s", created_roles)

    store = CredentialStore(session, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    if not settings.SEED_DEFAULT_USERS or store.count_users() > 0:
        return []

    password = _seed_password(settings)
    created: list[str] = []
    for username, email, roles in DEFAULT_ACCOUNTS:
        store.create(username, email, password, roles=[role.value for role in roles])
        created.append(username)

    if settings.APP_ENV == "dev":
        logger.warning(
            "Seeded default accounts %s with the configured development password", created
        )
    else:
        # Shown once on the console and never written to the log.
        print(
            f"Default accounts {created} were created with the generated password: {password}",
            file=sys.stderr,
        )
        logger.warning(
            "Seeded default accounts %s with a generated password printed to stderr; change it now",
            created,
        )
    return created


def initialize_stores(ctx: "AppContext") -> bool:
    """
    Create missing tables in both stores and seed identity data.

    Failures are logged and swallowed so the API still starts (possibly unseeded).
    Returns True when everything succeeded.
    """
    try:
        Base.metadata.create_all(bind=ctx.engine)
        IdentityBase.metadata.create_all(bind=ctx.identity_engine)
        with ctx.identity_session_factory() as session:
            seed_identity(session, ctx.settings)
    except Exception:
        logger.exception("Schema creation or identity seeding failed; starting without it")
        return False
    logger.info("Stores initialized")
    return True
