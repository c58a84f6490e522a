"""
Engine and session helpers for reading the operational store.

The export only reads; sessions are opened per run and closed afterwards.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from finance_export.logging_config import get_logger

logger = get_logger("db")


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the store. Pool settings are left to SQLAlchemy defaults."""
    engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
    logger.info("engine_initialized", extra={"dialect": engine.dialect.name, "echo": echo})
    return engine


@contextmanager
def read_session(engine: Engine) -> Generator[Session, None, None]:
    """Session scope for read-only work: always rolled back and closed."""
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
