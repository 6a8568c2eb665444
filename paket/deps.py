import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from .config import Settings
from .store import ArticleStore


def get_store(request: Request) -> ArticleStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Enforce ``Authorization: Bearer <auth_token>`` when a token is configured."""
    if not settings.auth_token:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(
        token.strip().encode("utf-8"), settings.auth_token.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")
