import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, Index, Uuid

from ..database import Base


def utcnow():
    return datetime.now(timezone.utc)


class Category(str, enum.Enum):
    COMIC = "Comic"
    WEBSITE = "Website"
    MAGAZINE = "Magazine"
    SKIT = "Skit"
    OTHER = "Other"


class FileType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"
    PDF = "pdf"
    ZIP = "zip"
    OTHER = "other"
    WEBSITE = "website"


CATEGORIES = [c.value for c in Category]


class Work(Base):
    __tablename__ = "works"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    roll = Column(String(64), nullable=False)
    email = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False)
    file_url = Column(String(2048), nullable=False)
    file_type = Column(String(16), nullable=False)
    # set once on insert, never touched by updates
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_works_timestamp", "timestamp"),
        Index("ix_works_category", "category"),
        Index("ix_works_name_title", "name", "title"),
    )
