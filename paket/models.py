from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in SQLite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def naive_utc(dt: datetime) -> datetime:
    """``dt`` as naive UTC; naive input is taken to be UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def new_guid() -> str:
    return str(uuid4())


class Article(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    guid: str = Field(default_factory=new_guid, index=True, unique=True)
    url: str
    title: Optional[str] = None

    # Naive UTC; the column type is pinned so newer sqlmodel releases don't
    # map it to a timezone-aware type
    saved_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False, index=True),
    )

    @property
    def display_title(self) -> str:
        return self.title or self.url


class WeeklyStat(SQLModel, table=True):
    # ISO week number, 1..53
    week_of_year: int = Field(primary_key=True)
    articles_count: int = 0
