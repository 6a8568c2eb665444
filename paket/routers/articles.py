import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from ..deps import get_store, require_token
from ..errors import ExtractionError
from ..extract import unsupported_title
from ..schemas import ArticleOut, DeleteOut
from ..store import ArticleStore, validate_url

logger = logging.getLogger(__name__)

router = APIRouter()


def _lookup_title(fetcher: Optional[Callable[[str], str]], url: str) -> Optional[str]:
    if fetcher is None:
        return None
    try:
        return fetcher(url)
    except ExtractionError as e:
        logger.warning("title lookup failed, saving anyway: %s", e)
        return unsupported_title(url)


def _prefers_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


@router.put("/save", response_model=ArticleOut, status_code=201, dependencies=[Depends(require_token)])
def save_article(
    request: Request,
    url: Optional[str] = Form(None),
    store: ArticleStore = Depends(get_store),
):
    url = validate_url(url)
    # Runs before the store takes its write lock
    title = _lookup_title(request.app.state.title_fetcher, url)
    return store.put(url, title=title)


@router.post("/delete", dependencies=[Depends(require_token)])
def delete_article(
    request: Request,
    guid: Optional[str] = Form(None),
    store: ArticleStore = Depends(get_store),
):
    guid = (guid or "").strip()
    if not guid:
        raise HTTPException(status_code=400, detail="missing guid")
    store.delete(guid)
    if _prefers_html(request):
        return RedirectResponse("/feed.html", status_code=303)
    return DeleteOut(guid=guid)
