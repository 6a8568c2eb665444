import functools
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import InvalidURL, NotFound, StorageIO
from .extract import fetch_title
from .routers.articles import router as articles_router
from .routers.feed import router as feed_router
from .routers.health import router as health_router
from .scheduler import create_scheduler
from .store import ArticleStore

logger = logging.getLogger(__name__)

_DEFAULT = object()


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ArticleStore] = None,
    title_fetcher: Optional[Callable[[str], str]] = _DEFAULT,  # type: ignore[assignment]
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        store = ArticleStore.open(settings.db, ttl_days=settings.ttl)
    if title_fetcher is _DEFAULT:
        title_fetcher = (
            functools.partial(fetch_title, timeout=settings.fetch_timeout) if settings.fetch_titles else None
        )

    app = FastAPI(title=settings.name, version="0.1.0")
    app.state.settings = settings
    app.state.store = store
    app.state.title_fetcher = title_fetcher

    # Browser extension popups PUT from their own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidURL, _error_handler(400))
    app.add_exception_handler(NotFound, _error_handler(404))
    app.add_exception_handler(StorageIO, _error_handler(500))

    # Routers
    app.include_router(articles_router)
    app.include_router(feed_router)
    app.include_router(health_router)

    @app.on_event("startup")
    def on_startup() -> None:
        scheduler = create_scheduler(store, settings)
        scheduler.start()
        app.state.scheduler = scheduler
        logger.info("serving %s from %s (ttl %d days)", settings.feed_link, settings.db, settings.ttl)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        scheduler = getattr(app.state, "scheduler", None)
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        store.close()

    return app
