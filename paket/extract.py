from __future__ import annotations

import html
import re
import time
from typing import Optional
from urllib.parse import unquote, urlsplit

import httpx

from .errors import ExtractionError

UA = "paket"
ACCEPT = "text/html,application/xhtml+xml,application/pdf,*/*;q=0"
HEADERS = {"User-Agent": UA, "Accept": ACCEPT}
MAX_REDIRECTS = 5
# Stop looking for <title> after this many bytes of body
MAX_SCAN_BYTES = 64 * 1024

NO_TITLE = "[NO TITLE]"

_TITLE_RE = re.compile(rb"<title(?:\s[^>]*)?>(.*?)<", re.IGNORECASE | re.DOTALL)


def unsupported_title(url: str) -> str:
    return f"[???] {url}"


def pdf_title(url: str) -> str:
    segments = [s for s in urlsplit(url).path.split("/") if s]
    name = unquote(segments[-1]) if segments else url
    return f"[PDF] {name}"


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def _charset(content_type: Optional[str]) -> str:
    for part in (content_type or "").split(";")[1:]:
        key, _, value = part.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return "utf-8"


def extract_html_title(body: bytes, charset: str = "utf-8") -> Optional[str]:
    """First <title> in ``body``, entity-decoded with whitespace collapsed."""
    m = _TITLE_RE.search(body)
    if not m:
        return None
    try:
        text = m.group(1).decode(charset, errors="replace")
    except LookupError:
        text = m.group(1).decode("utf-8", errors="replace")
    text = re.sub(r"\s+", " ", html.unescape(text)).strip()
    return text or None


def _remaining(deadline: float, url: str) -> float:
    left = deadline - time.monotonic()
    if left <= 0:
        raise ExtractionError(f"timed out fetching {url}")
    return left


def _read_head(response: httpx.Response, deadline: float) -> bytes:
    chunks = []
    size = 0
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        size += len(chunk)
        if size >= MAX_SCAN_BYTES or _TITLE_RE.search(b"".join(chunks)):
            break
        _remaining(deadline, str(response.url))
    return b"".join(chunks)[:MAX_SCAN_BYTES]


def fetch_title(url: str, timeout: float = 5.0, client: Optional[httpx.Client] = None) -> str:
    """Fetch ``url`` and describe it by its title.

    HTML pages yield their <title>, PDFs their file name, anything else a
    ``[???]`` placeholder. ``timeout`` bounds the whole lookup, redirects
    and body included. Network failures, bad status codes, URLs httpx
    refuses and running out of time all raise ExtractionError.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client()
    deadline = time.monotonic() + timeout
    try:
        for _ in range(MAX_REDIRECTS + 1):
            with client.stream(
                "GET",
                url,
                headers=HEADERS,
                timeout=_remaining(deadline, url),
                follow_redirects=False,
            ) as r:
                if r.is_redirect:
                    url = str(r.url.join(r.headers["location"]))
                    continue
                r.raise_for_status()
                content_type = r.headers.get("content-type")
                media_type = _media_type(content_type)
                final_url = str(r.url)
                if media_type in ("text/html", "application/xhtml+xml"):
                    body = _read_head(r, deadline)
                    return extract_html_title(body, _charset(content_type)) or NO_TITLE
                if media_type == "application/pdf":
                    return pdf_title(final_url)
                return unsupported_title(final_url)
        raise ExtractionError(f"more than {MAX_REDIRECTS} redirects fetching {url}")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ExtractionError(f"fetch failed for {url}: {e}") from e
    finally:
        if owns_client:
            client.close()
