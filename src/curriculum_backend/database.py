import logging
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, Session

from curriculum_backend.settings import settings

logger = logging.getLogger(__name__)

_database_options = {}

if settings.DATABASE_URL.startswith("postgresql"):
    _database_options = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 5,
        "pool_timeout": 30,
        "pool_recycle": 300
    }
elif settings.DATABASE_URL.startswith("sqlite"):
    _database_options = {"connect_args": {"check_same_thread": False}}

_engine = create_engine(settings.DATABASE_URL, **_database_options)
_SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

def get_engine():
    return _engine

def get_db() -> Generator[Session, None, None]:

    db = _SessionLocal()

    try:
        yield db
    except OperationalError:
        logger.error("Database connection failed")
        db.rollback()
        raise
    finally:
        db.close()
