"""
Database configuration and session management for SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from inkwell.core.config import DATABASE_URL

# SQLite connections are handed across threads by background jobs
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Engine & Session
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Declarative Base
Base = declarative_base()

# Import all models to register them with the Base metadata
import inkwell.auth.models  # noqa: F401,E402
import inkwell.journals.models  # noqa: F401,E402
import inkwell.insights.models  # noqa: F401,E402


# Dependency for FastAPI Routes
def get_db():
    """
    Yields a database session for use in FastAPI dependency injection.
    Ensures the session is closed after the request lifecycle.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
