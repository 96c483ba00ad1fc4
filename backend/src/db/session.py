"""SQLAlchemy engine and session factory."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_settings


logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(url: str, *, echo: bool = False) -> Engine:
    engine_kwargs = {
        "echo": echo,
        "future": True,
    }

    if url.startswith("sqlite"):
        engine_kwargs.update(
            {
                "connect_args": {"check_same_thread": False, "timeout": 30},
                "poolclass": StaticPool,
            }
        )
    else:
        engine_kwargs["pool_size"] = settings.pool_size
        engine_kwargs["max_overflow"] = settings.max_overflow
        engine_kwargs["pool_pre_ping"] = settings.pool_pre_ping

    return create_engine(url, **engine_kwargs)


engine = build_engine(settings.url, echo=settings.echo)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ensure_schema(bind: Engine | None = None) -> None:
    """Create the images/masks tables if they are missing."""
    from images.models import Base

    target = bind or engine
    Base.metadata.create_all(target)
    logger.info("Database schema ensured (dialect=%s)", target.dialect.name)
