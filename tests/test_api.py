"""Tests for the /api endpoints."""

import json
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from db.models import utcnow
from main import app
from pipeline import orchestrator
from pipeline.models import RunResult


@pytest.fixture
def seeded(repo, three_sources):
    left, center, _ = three_sources
    a1 = repo.create_article(
        source_id=left.id, title="Storm hits", url="https://left.example/storm",
        snippet="s", published_at=datetime(2026, 10, 19, 10, 0),
    )
    a2 = repo.create_article(
        source_id=center.id, title="Hurricane landfall", url="https://center.example/storm",
        snippet="s", published_at=datetime(2026, 10, 19, 11, 0),
    )
    now = utcnow()
    older = repo.create_story(
        headline="Budget passes", summary="S", topic="politics", region="us",
        key_facts=json.dumps(["a"]), status="published", published_at=now - timedelta(hours=2),
    )
    newer = repo.create_story(
        headline="Storm makes landfall", summary="S", topic="environment", region="uk",
        key_facts=json.dumps(["Landfall"]), consensus_score=80,
        narrative_lens=json.dumps([{"sourceName": "Left Daily", "framing": "climate"}]),
        coverage_gaps="not json", status="published", published_at=now,
    )
    repo.create_story(headline="Draft", summary="S", topic="world", status="draft")
    repo.link_article_to_story(newer.id, a1.id, "climate")
    repo.link_article_to_story(newer.id, a2.id, "Covered by Center Wire")
    return {"older": older, "newer": newer}


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "meridian"}


def test_sources(client, three_sources):
    data = client.get("/api/sources").json()
    assert [s["name"] for s in data] == ["Left Daily", "Center Wire", "Right Post"]
    assert data[0]["bias_rating"] == "left"


def test_stories_latest_first_published_only(client, seeded):
    data = client.get("/api/stories").json()
    assert [s["headline"] for s in data] == ["Storm makes landfall", "Budget passes"]
    assert data[0]["key_facts"] == ["Landfall"]
    assert data[0]["coverage_gaps"] == []


def test_stories_filters(client, seeded):
    assert [s["headline"] for s in client.get("/api/stories?topic=politics").json()] == ["Budget passes"]
    assert [s["headline"] for s in client.get("/api/stories?region=uk").json()] == ["Storm makes landfall"]
    assert client.get("/api/stories?topic=gossip").status_code == 422


def test_story_detail(client, seeded):
    data = client.get(f"/api/stories/{seeded['newer'].id}").json()
    assert data["consensus_score"] == 80
    assert data["narrative_lens"][0]["sourceName"] == "Left Daily"
    assert [(a["source_name"], a["framing"]) for a in data["articles"]] == [
        ("Left Daily", "climate"),
        ("Center Wire", "Covered by Center Wire"),
    ]


def test_story_not_found(client, db):
    assert client.get("/api/stories/999").status_code == 404


@pytest.fixture
def fake_runner():
    runner = MagicMock()
    runner.run.return_value = RunResult("Pipeline already running", 0)
    runner.is_running = True
    orchestrator.set_runner(runner)
    yield runner
    orchestrator.set_runner(None)


def test_trigger_pipeline(client, fake_runner):
    resp = client.post("/api/pipeline/trigger")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Pipeline already running", "storiesCreated": 0}


def test_pipeline_status(client, fake_runner):
    assert client.get("/api/pipeline/status").json() == {"running": True}
