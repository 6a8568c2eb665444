from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator, List, Optional

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError
from sqlalchemy import delete as sql_delete
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .db import create_db_and_tables, create_db_engine, session_context
from .errors import InvalidURL, NotFound, StorageIO
from .models import Article, WeeklyStat, naive_utc, new_guid, utcnow

logger = logging.getLogger(__name__)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def validate_url(url: Optional[str]) -> str:
    """Return ``url`` trimmed if it is an absolute http(s) URL, else raise InvalidURL."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidURL(url)
    url = url.strip()
    if any(ch.isspace() for ch in url):
        raise InvalidURL(url)
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError:
        raise InvalidURL(url) from None
    return url


class ArticleStore:
    """Saved articles in a single SQLite file.

    Mutations hold ``_write_lock`` for the length of one transaction, so
    ``put``, ``delete`` and ``expire`` never interleave. Reads open their own
    session and only ever see committed rows.
    """

    def __init__(self, engine: Engine, ttl_days: int = 60) -> None:
        self.engine = engine
        self.ttl_days = ttl_days
        self._write_lock = threading.Lock()
        create_db_and_tables(engine)

    @classmethod
    def open(cls, path: str, ttl_days: int = 60) -> "ArticleStore":
        return cls(create_db_engine(f"sqlite:///{path}"), ttl_days=ttl_days)

    def close(self) -> None:
        self.engine.dispose()

    @property
    def ttl(self) -> timedelta:
        return timedelta(days=self.ttl_days)

    def cutoff(self, now: Optional[datetime] = None) -> datetime:
        return naive_utc(now or utcnow()) - self.ttl

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._write_lock:
            with session_context(self.engine) as session:
                try:
                    yield session
                    session.commit()
                except SQLAlchemyError as exc:
                    session.rollback()
                    logger.exception("storage failure")
                    raise StorageIO(str(exc)) from exc
                except Exception:
                    session.rollback()
                    raise

    @contextmanager
    def _reading(self) -> Iterator[Session]:
        with session_context(self.engine) as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                logger.exception("storage failure")
                raise StorageIO(str(exc)) from exc

    def put(self, url: str, title: Optional[str] = None, now: Optional[datetime] = None) -> Article:
        url = validate_url(url)
        article = Article(guid=new_guid(), url=url, title=title or None, saved_at=naive_utc(now or utcnow()))
        with self._transaction() as session:
            session.add(article)
            session.flush()
            self._update_weekly_stats(session, article.saved_at)
        logger.info("saved %s as %s", url, article.guid)
        return article

    def delete(self, guid: str, now: Optional[datetime] = None) -> None:
        with self._transaction() as session:
            article = session.exec(select(Article).where(Article.guid == guid)).first()
            if article is None:
                logger.warning("delete of unknown guid %s", guid)
                raise NotFound(guid)
            session.delete(article)
            session.flush()
            self._update_weekly_stats(session, naive_utc(now or utcnow()))
        logger.info("deleted %s", guid)

    def expire(self, cutoff: datetime, now: Optional[datetime] = None) -> int:
        """Remove every article saved before ``cutoff``. Returns how many went."""
        cutoff = naive_utc(cutoff)
        with self._transaction() as session:
            result = session.exec(sql_delete(Article).where(Article.saved_at < cutoff))
            removed = result.rowcount
            self._update_weekly_stats(session, naive_utc(now or utcnow()))
        if removed:
            logger.info("expired %d articles saved before %s", removed, cutoff.isoformat())
        return removed

    def get(self, guid: str) -> Article:
        with self._reading() as session:
            article = session.exec(select(Article).where(Article.guid == guid)).first()
        if article is None:
            raise NotFound(guid)
        return article

    def list(self, active_only: bool = True, now: Optional[datetime] = None) -> List[Article]:
        stmt = select(Article)
        if active_only:
            stmt = stmt.where(Article.saved_at >= self.cutoff(now))
        stmt = stmt.order_by(Article.saved_at.desc()).order_by(Article.id.desc())
        with self._reading() as session:
            return list(session.exec(stmt).all())

    def count(self) -> int:
        with self._reading() as session:
            return session.exec(select(func.count()).select_from(Article)).one()

    def weekly_stats(self) -> List[WeeklyStat]:
        with self._reading() as session:
            return list(session.exec(select(WeeklyStat).order_by(WeeklyStat.week_of_year)).all())

    @staticmethod
    def _update_weekly_stats(session: Session, now: datetime) -> None:
        week = now.isocalendar()[1]
        total = session.exec(select(func.count()).select_from(Article)).one()
        stat = session.get(WeeklyStat, week)
        if stat is None:
            stat = WeeklyStat(week_of_year=week)
        stat.articles_count = max(0, total)
        session.add(stat)
        # Rows past the current week are left over from last year
        session.exec(sql_delete(WeeklyStat).where(WeeklyStat.week_of_year > week))
