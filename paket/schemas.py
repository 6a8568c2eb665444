from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ArticleOut(BaseModel):
    guid: str
    url: str
    title: Optional[str]
    saved_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeleteOut(BaseModel):
    guid: str
    deleted: bool = True


class HealthOut(BaseModel):
    status: str
    articles: int
