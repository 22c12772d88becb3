"""Database session management with connection pooling"""

from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from crediario.config import settings


def build_engine(url: str):
    """Pooled engine for server databases; sqlite gets the thread check disabled instead"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    # Recycle after 1 hour to avoid stale connections
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
