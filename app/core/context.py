"""Application context: everything built once at startup and shared read-only by requests."""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings
from app.core.database import build_engine, build_session_factory
from app.core.security import TokenService


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    engine: Engine
    identity_engine: Engine
    session_factory: sessionmaker[Session]
    identity_session_factory: sessionmaker[Session]
    token_service: TokenService

    def dispose(self) -> None:
        self.engine.dispose()
        self.identity_engine.dispose()


def build_context(settings: Settings) -> AppContext:
    """Create engines, session factories and the token service from settings."""
    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    identity_engine = build_engine(settings.IDENTITY_DATABASE_URL, echo=settings.DEBUG)
    return AppContext(
        settings=settings,
        engine=engine,
        identity_engine=identity_engine,
        session_factory=build_session_factory(engine),
        identity_session_factory=build_session_factory(identity_engine),
        token_service=TokenService(settings),
    )


def get_context(request: Request) -> AppContext:
    """Dependency returning the context stored on the app at creation time."""
    return request.app.state.context
