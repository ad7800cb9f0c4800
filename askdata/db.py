from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from askdata.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Build the shared connection pool; callers own it and must dispose() it."""
    url = make_url(settings.database_url)
    connect_args: dict[str, object] = {}
    if url.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = int(settings.db_connect_timeout)
        if settings.db_statement_timeout_ms > 0:
            connect_args["options"] = f"-c statement_timeout={int(settings.db_statement_timeout_ms)}"

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )
