"""Database utilities and setup."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from api.config import DATABASE_URL, DB_DIR


def make_engine(url: str) -> Engine:
    """Create engine; SQLite connections may be used from FastAPI's threadpool."""
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )


engine = make_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def init_db(bind: Engine | None = None) -> None:
    """Initialize database (create all tables)."""
    # registers the models on Base.metadata
    import api.models.db  # noqa: F401

    if bind is None:
        DB_DIR.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind or engine)
