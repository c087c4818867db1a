"""Database engine, session factory and FastAPI session dependency.

The same engine configuration serves PostgreSQL (production) and SQLite
(local development and tests).
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings


def build_engine(database_url: str, statement_timeout_ms: int | None = None, echo: bool = False) -> Engine:
    """Create an engine with dialect-appropriate pool and timeout settings.

    Args:
        database_url: SQLAlchemy database URL
        statement_timeout_ms: PostgreSQL statement_timeout; ignored for SQLite
        echo: Log emitted SQL

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    engine_kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": echo,
    }

    if database_url.startswith("sqlite"):
        # Request handlers run in a threadpool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10
        if statement_timeout_ms:
            engine_kwargs["connect_args"] = {
                "options": f"-c statement_timeout={int(statement_timeout_ms)}"
            }

    return create_engine(database_url, **engine_kwargs)


_settings = get_settings()

engine = build_engine(
    _settings.DATABASE_URL,
    statement_timeout_ms=_settings.DB_STATEMENT_TIMEOUT_MS,
    echo=_settings.DB_ECHO,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.query(Document).all()

    Automatically commits on success, rolls back on exception.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/documents")
        def list_documents(db: Session = Depends(get_db)):
            return db.query(Document).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
