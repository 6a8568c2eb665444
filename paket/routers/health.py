from fastapi import APIRouter, Depends

from ..deps import get_store
from ..schemas import HealthOut
from ..store import ArticleStore

router = APIRouter()


@router.get("/health", response_model=HealthOut)
def health(store: ArticleStore = Depends(get_store)):
    return HealthOut(status="ok", articles=store.count())
