from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import Settings
from .models import utcnow
from .store import ArticleStore

logger = logging.getLogger(__name__)


def sweep_expired(store: ArticleStore, now: Optional[datetime] = None) -> int:
    """Drop articles older than the store's TTL. Returns number removed."""
    now = now or utcnow()
    removed = store.expire(store.cutoff(now), now=now)
    logger.info("expiry sweep removed %d articles", removed)
    return removed


def create_scheduler(store: ArticleStore, settings: Settings) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()

    # sync job, so it runs in the executor and never blocks request handling
    scheduler.add_job(
        sweep_expired,
        "interval",
        args=[store],
        minutes=settings.expiry_interval_minutes,
        next_run_time=datetime.now(),
        id="expire_articles",
        max_instances=1,
        coalesce=True,
    )

    return scheduler
