from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

DATABASE_URL = settings.database_url  # fail fast if missing

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    future=True,
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(bind: Engine = engine) -> None:
    """Raises if the store cannot be reached."""
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("database connected", extra={"dialect": bind.dialect.name})


def dispose_engine(bind: Engine = engine) -> None:
    bind.dispose()
    logger.info("database engine disposed")
