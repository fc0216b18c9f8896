"""Engine construction and per-request session management for both stores."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for url; SQLite engines are made usable from the request threadpool."""
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in url:
            # One shared connection, otherwise every thread sees its own empty database.
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, pool_pre_ping=True, echo=echo)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields an application-data session and closes it when done."""
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_identity_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields an identity-data session and closes it when done."""
    db = request.app.state.context.identity_session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
