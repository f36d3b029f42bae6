from uuid import uuid4
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


def generate_uuid() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
