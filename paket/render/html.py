from __future__ import annotations

import html
from datetime import datetime
from typing import Iterable, Optional

from ..config import Settings
from ..models import Article, WeeklyStat
from .dates import http_date

CONTENT_TYPE = "text/html; charset=utf-8"
WEEKS_PER_YEAR = 53

STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; max-width: 760px; margin: 2em auto; padding: 0 1em; color: #111827; background: #ffffff; }
h1 { margin-bottom: 0.2em; }
h3 { color: #6b7280; font-weight: normal; margin-top: 0; }
a { color: #2563eb; }
.feed-info { color: #6b7280; font-size: 13px; margin-bottom: 1.5em; }
.feed-info p { margin: 0.2em 0; }
.month-labels { display: flex; justify-content: space-between; color: #6b7280; font-size: 11px; }
.calendar { display: grid; grid-template-columns: repeat(53, 1fr); gap: 2px; margin-bottom: 2em; }
.week-square { aspect-ratio: 1; border-radius: 2px; background: #2563eb; opacity: calc(0.08 + 0.92 * var(--articles) / max(var(--max-articles), 1)); }
.feed-items { list-style: none; padding: 0; }
.feed-item { border: 1px solid #e5e7eb; border-radius: 8px; padding: 12px; margin-bottom: 10px; }
.feed-item h2 { font-size: 16px; margin: 0 0 6px 0; word-break: break-word; }
.published-date { color: #6b7280; font-size: 12px; margin-bottom: 8px; }
.delete-btn { background: none; border: 1px solid #e5e7eb; border-radius: 4px; color: #b91c1c; cursor: pointer; font-size: 12px; padding: 2px 8px; }
.empty { color: #6b7280; }

@media (prefers-color-scheme: dark) {
  body { color: #e5e7eb; background: #0b1020; }
  a { color: #93c5fd; }
  .feed-item { border-color: #1f2937; background: #121934; }
  .feed-info, .published-date, h3, .month-labels, .empty { color: #9ca3af; }
}
"""

MONTH_LABELS = ("Jan", "Mar", "Jun", "Sep", "Dec")


def _calendar(weekly_stats: Iterable[WeeklyStat]) -> str:
    counts = {stat.week_of_year: max(0, stat.articles_count) for stat in weekly_stats}
    max_count = max(counts.values(), default=0)
    squares = []
    for week in range(1, WEEKS_PER_YEAR + 1):
        count = counts.get(week, 0)
        squares.append(
            f'<div class="week-square" style="--articles: {count};" title="{count} articles"></div>'
        )
    labels = "".join(f"<span>{label}</span>" for label in MONTH_LABELS)
    return (
        f'<div class="month-labels">{labels}</div>'
        f'<div class="calendar" style="--max-articles: {max_count};">{"".join(squares)}</div>'
    )


def _item(article: Article) -> str:
    link = html.escape(article.url, quote=True)
    title = html.escape(article.display_title)
    guid = html.escape(article.guid, quote=True)
    return (
        '<li><article class="feed-item">'
        f'<h2><a href="{link}">{title}</a></h2>'
        f'<div class="published-date">Published: {http_date(article.saved_at)}</div>'
        '<form method="POST" action="/delete" style="display: inline;">'
        f'<input type="hidden" name="guid" value="{guid}">'
        '<button type="submit" class="delete-btn">Delete</button>'
        "</form></article></li>"
    )


def render_html(
    articles: Iterable[Article],
    settings: Settings,
    weekly_stats: Iterable[WeeklyStat] = (),
    now: Optional[datetime] = None,
) -> str:
    """Human-readable page listing the given articles, newest first as given."""
    name = html.escape(settings.name)
    desc = html.escape(settings.desc)
    link = html.escape(settings.feed_link, quote=True)

    items = [_item(article) for article in articles]
    listing = (
        f'<ul class="feed-items">{"".join(items)}</ul>'
        if items
        else '<p class="empty">Nothing saved yet.</p>'
    )

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head>'
        '<meta charset="UTF-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        f"<title>{name}</title>"
        f"<style>{STYLE}</style>"
        "</head><body>"
        f"<h1>{name}</h1>"
        f"<h3>{desc}</h3>"
        '<div class="feed-info">'
        f'<p>Feed: <a href="{link}">{link}</a></p>'
        f"<p>Last Updated: {http_date(now)}</p>"
        "</div>"
        f"{_calendar(weekly_stats)}"
        f"{listing}"
        "</body></html>"
    )
