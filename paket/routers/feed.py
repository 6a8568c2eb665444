from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse, Response

from ..config import Settings
from ..deps import get_app_settings, get_store
from ..render import html, rss
from ..store import ArticleStore

router = APIRouter()


@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse("/feed.html")


@router.get("/feed.html")
def feed_html(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    page = html.render_html(store.list(active_only=True), settings, store.weekly_stats())
    return Response(content=page, media_type=html.CONTENT_TYPE)


@router.get("/feed.xml")
def feed_xml(
    store: ArticleStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    document = rss.render_rss(store.list(active_only=True), settings)
    return Response(content=document, media_type=rss.CONTENT_TYPE)
