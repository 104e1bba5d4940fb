"""
Database engine and session management.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        database_url: Database URL; defaults to the configured one
        echo: Whether to log SQL statements

    Returns:
        Engine bound to the database
    """
    url = database_url or settings.database_url
    kwargs = {"echo": settings.database_echo if echo is None else echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases live as long as their single connection
            kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    # Registers the ORM models on Base.metadata
    from . import db_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database schema ready at {engine.url}")


engine = create_db_engine()
SessionLocal = create_session_factory(engine)
