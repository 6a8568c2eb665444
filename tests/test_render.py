# Tests for the HTML page and RSS feed renderers.

from datetime import datetime
from xml.etree import ElementTree as ET

import feedparser

from paket.models import Article, WeeklyStat
from paket.render.dates import http_date
from paket.render.html import render_html
from paket.render.rss import render_rss

NOW = datetime(2024, 1, 1, 10, 0, 0)


def _articles():
    return [
        Article(guid="g-2", url="https://b.example/two?x=1&y=2", title="Second <one>", saved_at=datetime(2023, 12, 31, 9, 30)),
        Article(guid="g-1", url="https://a.example/x", title=None, saved_at=datetime(2023, 12, 30, 8, 0)),
    ]


class TestHttpDate:
    def test_naive_is_utc(self):
        assert http_date(NOW) == "Mon, 01 Jan 2024 10:00:00 GMT"


class TestRenderRSS:
    def test_well_formed_with_one_item_per_article(self, settings):
        doc = render_rss(_articles(), settings, now=NOW)
        root = ET.fromstring(doc.encode("utf-8"))
        assert root.tag == "rss"
        assert root.get("version") == "2.0"
        items = root.findall("./channel/item")
        assert len(items) == 2

    def test_channel_metadata(self, settings):
        root = ET.fromstring(render_rss([], settings, now=NOW).encode("utf-8"))
        channel = root.find("channel")
        assert channel.findtext("title") == "Test Paket"
        assert channel.findtext("description") == "Links for tests"
        assert channel.findtext("link") == "https://paket.example/feed.xml"
        assert channel.findtext("lastBuildDate") == "Mon, 01 Jan 2024 10:00:00 GMT"
        assert channel.findall("item") == []

    def test_items_carry_guid_link_and_date(self, settings):
        root = ET.fromstring(render_rss(_articles(), settings, now=NOW).encode("utf-8"))
        first, second = root.findall("./channel/item")
        assert first.findtext("guid") == "g-2"
        assert first.find("guid").get("isPermaLink") == "false"
        assert first.findtext("link") == "https://b.example/two?x=1&y=2"
        assert first.findtext("title") == "Second <one>"
        assert first.findtext("pubDate") == "Sun, 31 Dec 2023 09:30:00 GMT"
        # Untitled articles fall back to their URL
        assert second.findtext("title") == "https://a.example/x"

    def test_parses_as_feed(self, settings):
        parsed = feedparser.parse(render_rss(_articles(), settings, now=NOW).encode("utf-8"))
        assert len(parsed.entries) == 2
        assert parsed.feed.title == "Test Paket"
        assert [e.link for e in parsed.entries] == ["https://b.example/two?x=1&y=2", "https://a.example/x"]
        assert [e.id for e in parsed.entries] == ["g-2", "g-1"]


class TestRenderHTML:
    def test_lists_articles_with_delete_forms(self, settings):
        page = render_html(_articles(), settings, now=NOW)
        assert page.startswith("<!DOCTYPE html>")
        assert '<a href="https://b.example/two?x=1&amp;y=2">Second &lt;one&gt;</a>' in page
        assert '<a href="https://a.example/x">https://a.example/x</a>' in page
        assert page.count('action="/delete"') == 2
        assert '<input type="hidden" name="guid" value="g-1">' in page
        assert "Published: Sat, 30 Dec 2023 08:00:00 GMT" in page
        assert "Last Updated: Mon, 01 Jan 2024 10:00:00 GMT" in page

    def test_escapes_settings(self, settings):
        settings = settings.model_copy(update={"name": "Mine & <yours>"})
        page = render_html([], settings, now=NOW)
        assert "<title>Mine &amp; &lt;yours&gt;</title>" in page
        assert "Nothing saved yet." in page

    def test_calendar_has_a_square_per_week(self, settings):
        stats = [WeeklyStat(week_of_year=2, articles_count=5), WeeklyStat(week_of_year=10, articles_count=3)]
        page = render_html([], settings, stats, now=NOW)
        assert page.count('class="week-square"') == 53
        assert "--max-articles: 5;" in page
        assert 'title="5 articles"' in page
        assert 'title="3 articles"' in page

    def test_pure(self, settings):
        articles = _articles()
        assert render_html(articles, settings, now=NOW) == render_html(articles, settings, now=NOW)
        assert [a.guid for a in articles] == ["g-2", "g-1"]
