"""
Database connection and session management.
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from autotrack.core.config import DATABASE_DSN

logger = logging.getLogger(__name__)

if not DATABASE_DSN:
    raise ValueError("DATABASE_DSN not configured. Create autotrack/config_local.py from config_local.example.py")


def _engine_kwargs(dsn: str) -> dict:
    """Pool settings for server databases; SQLite needs cross-thread access instead."""
    if dsn.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 60,
        "connect_args": {
            "connect_timeout": 30,
            "read_timeout": 300,
            "write_timeout": 300,
        } if "pymysql" in dsn else {},
    }


engine = create_engine(DATABASE_DSN, echo=False, **_engine_kwargs(DATABASE_DSN))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        try:
            db.close()
        except Exception as e:
            # Connection may already be gone; closing must not mask the request outcome
            logger.warning(f"Error closing database session (connection may be lost): {str(e)}")
