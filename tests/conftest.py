"""Shared fixtures: temp database, fake model, RSS builders."""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any
from unittest.mock import MagicMock
from xml.sax.saxutils import escape

import pytest

from collectors.base import FetchedArticle
from db.models import Source
from db.repository import Repository


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Use a temporary database for each test."""
    db_path = tmp_path / "test.db"
    # Patch in both config and db.database (which imports by value)
    monkeypatch.setattr("config.DB_PATH", db_path)
    monkeypatch.setattr("db.database.DB_PATH", db_path)

    import db.database as db_mod
    db_mod._engine = None
    db_mod._SessionFactory = None

    db_mod.init_db()
    yield db_path

    if db_mod._engine is not None:
        db_mod._engine.dispose()
    db_mod._engine = None
    db_mod._SessionFactory = None


@pytest.fixture
def repo(db):
    return Repository()


@pytest.fixture
def three_sources(repo):
    """Left / center / right outlets with feeds."""
    return [
        repo.create_source(name="Left Daily", url="https://left.example", rss_url="https://left.example/rss", bias_rating="left"),
        repo.create_source(name="Center Wire", url="https://center.example", rss_url="https://center.example/rss", bias_rating="center"),
        repo.create_source(name="Right Post", url="https://right.example", rss_url="https://right.example/rss", bias_rating="right"),
    ]


class FakeLLM:
    """Stands in for LLMClient. Each call pops the next response.

    A response that is an exception instance is raised instead of returned.
    """

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def complete_json(self, system: str, user: str, max_tokens: int) -> Any:
        self.calls.append({"system": system, "user": user, "max_tokens": max_tokens})
        if not self.responses:
            raise AssertionError("FakeLLM ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def make_source(id: int = 1, name: str = "Left Daily", bias: str = "left", **kw: Any) -> Source:
    """Unsaved Source for collector tests."""
    return Source(
        id=id,
        name=name,
        url=kw.get("url", "https://example.com"),
        rss_url=kw.get("rss_url", f"https://example.com/{id}/rss"),
        bias_rating=bias,
        is_active=kw.get("is_active", True),
    )


def make_fetched(
    source_id: int,
    source_name: str,
    url: str,
    title: str = "Something happened",
    bias: str = "center",
    snippet: str = "Details of what happened.",
) -> FetchedArticle:
    return FetchedArticle(
        source_id=source_id,
        source_name=source_name,
        bias_rating=bias,
        title=title,
        url=url,
        snippet=snippet,
        published_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


def make_feed(items: list[dict[str, Any]]) -> bytes:
    """Build an RSS 2.0 document. `published` may be a datetime or a raw string."""
    parts = []
    for item in items:
        fields = []
        if item.get("title") is not None:
            fields.append(f"<title>{escape(item['title'])}</title>")
        if item.get("link") is not None:
            fields.append(f"<link>{escape(item['link'])}</link>")
        published = item.get("published")
        if isinstance(published, datetime):
            fields.append(f"<pubDate>{format_datetime(published)}</pubDate>")
        elif published is not None:
            fields.append(f"<pubDate>{escape(published)}</pubDate>")
        if item.get("description") is not None:
            fields.append(f"<description>{escape(item['description'])}</description>")
        parts.append("<item>" + "".join(fields) + "</item>")
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Test feed</title>'
        "<link>https://example.com</link><description>t</description>"
        + "".join(parts)
        + "</channel></rss>"
    ).encode()


def feed_response(body: bytes) -> MagicMock:
    resp = MagicMock()
    resp.content = body
    resp.status_code = 200
    resp.raise_for_status = MagicMock()
    return resp
