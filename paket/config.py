from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class Settings(BaseSettings):
    # Feed metadata
    name: str = "My Paket"
    desc: str = "My links"
    # Public base URL of the feed, used as the RSS channel link
    link: Optional[str] = None

    db: str = "paket.db"
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    # Articles older than this many days (rolling 24h windows) expire
    ttl: int = Field(60, ge=0)
    expiry_interval_minutes: int = Field(60, ge=1)

    # Bearer token required on /save and /delete; empty disables auth
    auth_token: str = ""

    fetch_titles: bool = True
    fetch_timeout: float = Field(5.0, gt=0)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PAKET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("link")
    @classmethod
    def _check_link(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError:
            raise ValueError("invalid link") from None
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @property
    def feed_link(self) -> str:
        return self.link or f"http://localhost:{self.port}/feed.xml"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
