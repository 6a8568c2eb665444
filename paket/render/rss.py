from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from xml.etree import ElementTree as ET

from ..config import Settings
from ..models import Article
from .dates import http_date

CONTENT_TYPE = "application/rss+xml"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _text(parent: ET.Element, tag: str, text: str, **attrib: str) -> ET.Element:
    el = ET.SubElement(parent, tag, attrib)
    el.text = text
    return el


def render_rss(articles: Iterable[Article], settings: Settings, now: Optional[datetime] = None) -> str:
    """RSS 2.0 document with one <item> per article, in the order given."""
    date = http_date(now)

    rss = ET.Element("rss", {"version": "2.0"})
    channel = ET.SubElement(rss, "channel")
    _text(channel, "title", settings.name)
    _text(channel, "description", settings.desc)
    _text(channel, "link", settings.feed_link)
    _text(channel, "pubDate", date)
    _text(channel, "lastBuildDate", date)
    # Feed readers may poll as often as they like
    _text(channel, "ttl", "0")

    for article in articles:
        item = ET.SubElement(channel, "item")
        _text(item, "title", article.display_title)
        _text(item, "link", article.url)
        _text(item, "pubDate", http_date(article.saved_at))
        _text(item, "guid", article.guid, isPermaLink="false")

    return XML_DECLARATION + ET.tostring(rss, encoding="unicode")
