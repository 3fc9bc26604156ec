"""Database engine configuration."""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from quizbank.core.config import settings


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create SQLAlchemy engine."""
    url = make_url(database_url or settings.DATABASE_URL)
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": False}

    if url.get_backend_name() == "sqlite":
        # SQLite connections are shared between the event loop and worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One connection, otherwise every checkout sees an empty in-memory database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_size"] = 5
        kwargs["max_overflow"] = 10

    return create_engine(url, **kwargs)


# Global engine instance
engine = create_db_engine()
