"""
Database session management.

Provides explicit ORM session handling with SQLAlchemy.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from alphaone.core.config import Config
from alphaone.core.models import Base


def get_engine(config: Config) -> Engine:
    """
    Create SQLAlchemy engine.

    Uses SQLite with WAL mode so a reader never sees a half-written ledger.
    """
    db_path = Path(config.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )

    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    return engine


def init_db(config: Config, engine: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist. A passed-in engine is left
    open for the caller.
    """
    if engine is not None:
        Base.metadata.create_all(engine)
        return

    engine = get_engine(config)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(config: Config, engine: Optional[Engine] = None) -> Session:
    """
    Create a new database session.

    Remember to close or use as context manager.
    """
    SessionLocal = sessionmaker(bind=engine if engine is not None else get_engine(config))
    return SessionLocal()


@contextmanager
def session_scope(
    config: Config, engine: Optional[Engine] = None
) -> Generator[Session, None, None]:
    """
    Provide transactional scope around a series of operations.

    Without an engine a throwaway one is created and disposed afterwards.

    Usage:
        with session_scope(config, engine) as session:
            session.merge(entry)
    """
    session = get_session(config, engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        if engine is None:
            session.get_bind().dispose()
