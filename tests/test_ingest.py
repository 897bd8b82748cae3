"""Tests for URL-based dedup ingestion."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from conftest import make_fetched
from db.database import get_session
from db.models import Article
from db.repository import DuplicateArticleError
from pipeline.ingest import ingest_articles


def _count() -> int:
    session = get_session()
    try:
        return session.query(Article).count()
    finally:
        session.close()


def test_ingest_creates_new_articles(repo, three_sources):
    left, center, _ = three_sources
    fetched = [
        make_fetched(left.id, left.name, "https://left.example/1"),
        make_fetched(center.id, center.name, "https://center.example/1"),
    ]
    created = ingest_articles(fetched, repo)

    assert [a.url for a in created] == ["https://left.example/1", "https://center.example/1"]
    stored = repo.find_article_by_url("https://left.example/1")
    assert stored.source_id == left.id
    assert stored.published_at.tzinfo is None
    assert stored.ingested_at is not None


def test_ingest_is_idempotent(repo, three_sources):
    left, center, right = three_sources
    fetched = [
        make_fetched(left.id, left.name, "https://left.example/1"),
        make_fetched(center.id, center.name, "https://center.example/1"),
        make_fetched(right.id, right.name, "https://right.example/1"),
    ]
    assert len(ingest_articles(fetched, repo)) == 3
    assert ingest_articles(fetched, repo) == []
    assert _count() == 3


def test_repeated_url_with_title_drift_is_one_article(repo, three_sources):
    left = three_sources[0]
    fetched = [
        make_fetched(left.id, left.name, "https://left.example/1", title="Original title"),
        make_fetched(left.id, left.name, "https://left.example/1", title="Updated title"),
    ]
    created = ingest_articles(fetched, repo)

    assert len(created) == 1
    assert _count() == 1
    assert repo.find_article_by_url("https://left.example/1").title == "Original title"


def test_lost_insert_race_is_skipped():
    repo = MagicMock()
    repo.find_article_by_url.return_value = None
    repo.create_article.side_effect = DuplicateArticleError("https://left.example/1")

    created = ingest_articles([make_fetched(1, "Left Daily", "https://left.example/1")], repo)
    assert created == []


def test_create_article_raises_duplicate_error(repo, three_sources):
    left = three_sources[0]
    fields = dict(
        source_id=left.id,
        title="t",
        url="https://left.example/dup",
        snippet="",
        published_at=datetime(2026, 10, 19, 12, 0),
    )
    repo.create_article(**fields)
    with pytest.raises(DuplicateArticleError) as exc:
        repo.create_article(**fields)
    assert exc.value.url == "https://left.example/dup"
