"""
Create an account (e.g. the first admin outside dev). Run from project root:
  python -m app.scripts.create_user EMAIL USERNAME PASSWORD [--admin]
Example:
  python -m app.scripts.create_user ops@example.com ops 'S3cure!pass' --admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.context import build_context
from app.core.errors import ConflictError, ValidationFailed
from app.models import IdentityBase, RoleName
from app.schemas.auth import RegisterRequest
from app.services.credential_store import CredentialStore
from app.services.seed import ensure_roles

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Todo API user.")
    parser.add_argument("email", help="Email address (login identifier)")
    parser.add_argument("username", help="Display name (1-256 chars)")
    parser.add_argument("password", help="Password (8+ chars, mixed case, digit, symbol)")
    parser.add_argument("--admin", action="store_true", help="Also grant the Admin role")
    args = parser.parse_args(argv)

    try:
        request = RegisterRequest(email=args.email, username=args.username, password=args.password)
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    ctx = build_context(get_settings())
    IdentityBase.metadata.create_all(bind=ctx.identity_engine)
    db = ctx.identity_session_factory()
    try:
        ensure_roles(db)
        store = CredentialStore(db, bcrypt_rounds=ctx.settings.BCRYPT_ROUNDS)
        roles = [RoleName.USER] + ([RoleName.ADMIN] if args.admin else [])
        try:
            user = store.create(
                request.username,
                request.email,
                request.password,
                roles=[role.value for role in roles],
            )
        except ConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
        except ValidationFailed as e:
            for field, messages in e.errors.items():
                for message in messages:
                    print(f"{field}: {message}", file=sys.stderr)
            return 1
        logger.info(
            "Created user '%s' <%s> with roles %s",
            user.username,
            user.email,
            [r.value for r in roles],
        )
        return 0
    finally:
        db.close()
        ctx.dispose()


if __name__ == "__main__":
    sys.exit(main())
