"""SQLAlchemy engine, session factory, and request-scoped session dependency."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ticketbook.config import settings


def make_engine(url: str, pool_size: int = 10):
    """Build an engine; SQLite gets a thread-shareable connection, servers a bounded pool."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_size=pool_size, max_overflow=0, pool_pre_ping=True)


engine = make_engine(settings.database_url, settings.DB_POOL_SIZE)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Yield a session and always close it after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
