"""Send the URL you are reading to a Paket server.

Same job as the browser popup and the Android share target: read the
endpoint and a JSON object of extra headers, PUT ``url=<url>`` once, report
success or failure. No retries.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import anyio
import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ClientSettings(BaseSettings):
    # Full URL of the server's /save endpoint
    endpoint: str = ""
    # JSON object, e.g. {"Authorization": "Bearer ..."}
    headers: str = ""
    timeout: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="PAKET_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@dataclass
class SaveResult:
    ok: bool
    message: str
    status_code: Optional[int] = None


def parse_headers(raw: Optional[str]) -> Dict[str, str]:
    """Custom headers from a JSON object string; anything unusable gives ``{}``."""
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("ignoring malformed headers: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring headers: expected a JSON object, got %s", type(data).__name__)
        return {}
    return {str(k): str(v) for k, v in data.items()}


def build_headers(custom: Dict[str, str]) -> Dict[str, str]:
    headers = dict(custom)
    if not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = FORM_CONTENT_TYPE
    return headers


async def save_url(
    endpoint: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SaveResult:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            r = await client.put(endpoint, headers=build_headers(headers or {}), data={"url": url})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return SaveResult(ok=False, message=f"Network error: {e}")
    if r.is_success:
        return SaveResult(ok=True, message="Success! URL saved", status_code=r.status_code)
    return SaveResult(ok=False, message=f"Server error: {r.status_code}", status_code=r.status_code)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="paket-save", description="Save a URL to a Paket server")
    parser.add_argument("url", help="page to save")
    parser.add_argument("--endpoint", help="Paket /save URL (env PAKET_CLIENT_ENDPOINT)")
    parser.add_argument("--headers", help="extra headers as a JSON object (env PAKET_CLIENT_HEADERS)")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    settings = ClientSettings()
    endpoint = (args.endpoint or settings.endpoint).strip()
    if not endpoint:
        print("⚠ Please configure Paket endpoint", file=sys.stderr)
        return 1

    headers = parse_headers(args.headers if args.headers is not None else settings.headers)

    async def _inner() -> SaveResult:
        return await save_url(endpoint, args.url, headers, timeout=settings.timeout)

    result = anyio.run(_inner)
    if result.ok:
        print(f"✓ {result.message}")
        return 0
    print(f"✗ {result.message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
