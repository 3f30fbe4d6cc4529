"""
Database plumbing for SQLStorage.

The engine and session factory are built lazily from DATABASE_URL and cached,
so the JSON backend never touches SQLAlchemy at runtime. Tests reset both
caches through ``get_engine.cache_clear()`` and ``session_factory.cache_clear()``.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from api.core.config import get_settings

Base = declarative_base()


def database_url() -> str:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is empty; the SQL store needs a database to talk to.")
    return url


def _engine_options(url: str) -> dict:
    options = {"future": True, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # sync routes run on the threadpool, not on the thread that opened the file
        options["connect_args"] = {"check_same_thread": False}
    return options


@lru_cache
def get_engine() -> Engine:
    url = database_url()
    return create_engine(url, **_engine_options(url))


@lru_cache
def session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def transaction() -> Iterator[Session]:
    """Session that commits when the block succeeds and rolls back otherwise."""
    session = session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
