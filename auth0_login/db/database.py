"""
Database engine and session management.

The engine and session factory are created lazily on first use so that
importing the application never opens a connection.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from auth0_login.core.config import settings

Base = declarative_base()

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        kwargs = {
            "pool_pre_ping": True,
            "pool_recycle": settings.DATABASE_POOL_RECYCLE,
            # SQL echo stays off; logging configuration controls verbosity
            "echo": False,
        }
        if not settings.DATABASE_URL.startswith("sqlite"):
            kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
        _engine = create_engine(settings.DATABASE_URL, **kwargs)
    return _engine


def get_session_local() -> sessionmaker:
    """Return the shared session factory, creating it on first call."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a session that is always closed."""
    db = get_session_local()()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create any missing tables."""
    # Import models so they register with Base.metadata
    import auth0_login.models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
