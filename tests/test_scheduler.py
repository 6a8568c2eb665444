# Tests for the background expiry sweep.

from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi.testclient import TestClient

from paket.main import create_app
from paket.models import utcnow
from paket.scheduler import create_scheduler, sweep_expired


class TestSweepExpired:
    def test_removes_only_articles_past_ttl(self, store):
        now = utcnow()
        store.ttl_days = 10
        store.put("https://a.example/old", now=now - timedelta(days=11))
        keep = store.put("https://a.example/recent", now=now - timedelta(days=9))

        assert sweep_expired(store, now=now) == 1
        assert [a.guid for a in store.list(active_only=False)] == [keep.guid]

    def test_zero_ttl_clears_everything_older_than_now(self, store):
        now = utcnow()
        store.ttl_days = 0
        store.put("https://a.example/x", now=now - timedelta(seconds=1))
        assert sweep_expired(store, now=now) == 1
        assert store.count() == 0


class TestCreateScheduler:
    def test_interval_job(self, store, settings):
        scheduler = create_scheduler(store, settings)
        assert isinstance(scheduler, AsyncIOScheduler)
        job = scheduler.get_job("expire_articles")
        assert job is not None
        assert job.trigger.interval == timedelta(minutes=settings.expiry_interval_minutes)
        assert job.args == (store,)

    def test_started_and_stopped_with_app(self, settings, store):
        app = create_app(settings, store=store, title_fetcher=None)
        with TestClient(app):
            assert app.state.scheduler.running
        assert not app.state.scheduler.running
