"""API routes for meridian."""

import json
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from config import REGIONS, TOPICS
from db.models import Source, Story
from db.repository import Repository
from pipeline.orchestrator import get_runner, trigger_pipeline_run

router = APIRouter(prefix="/api")
_repo = Repository()


def _parse_json_list(raw: str | None) -> list[Any]:
    """Parse a JSON array column, tolerating bad data."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    return parsed if isinstance(parsed, list) else []


def _serialize_source(s: Source) -> dict[str, Any]:
    return {
        "id": s.id,
        "name": s.name,
        "url": s.url,
        "rss_url": s.rss_url,
        "bias_rating": s.bias_rating,
        "logo_url": s.logo_url,
        "is_active": s.is_active,
    }


def _serialize_story(s: Story) -> dict[str, Any]:
    return {
        "id": s.id,
        "headline": s.headline,
        "summary": s.summary,
        "topic": s.topic,
        "region": s.region,
        "key_facts": _parse_json_list(s.key_facts),
        "divergence_summary": s.divergence_summary,
        "consensus_score": s.consensus_score,
        "narrative_lens": _parse_json_list(s.narrative_lens),
        "coverage_gaps": _parse_json_list(s.coverage_gaps),
        "status": s.status,
        "created_at": s.created_at.isoformat() if s.created_at else None,
        "published_at": s.published_at.isoformat() if s.published_at else None,
    }


@router.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok", "service": "meridian"}


@router.get("/sources")
def list_sources() -> list[dict[str, Any]]:
    return [_serialize_source(s) for s in _repo.list_sources()]


@router.get("/stories")
def list_stories(
    limit: int = Query(default=20, ge=1, le=100),
    topic: str | None = Query(default=None),
    region: str | None = Query(default=None),
) -> list[dict[str, Any]]:
    """Latest published stories, optionally filtered by topic and region."""
    if topic and topic not in TOPICS:
        raise HTTPException(status_code=422, detail=f"Unknown topic: {topic}")
    if region and region not in REGIONS:
        raise HTTPException(status_code=422, detail=f"Unknown region: {region}")
    return [_serialize_story(s) for s in _repo.list_stories(limit=limit, topic=topic, region=region)]


@router.get("/stories/{story_id}")
def get_story(story_id: int) -> dict[str, Any]:
    """One story with the articles it was synthesized from."""
    story = _repo.get_story(story_id)
    if story is None:
        raise HTTPException(status_code=404, detail="Story not found")
    out = _serialize_story(story)
    out["articles"] = [
        {
            "id": article.id,
            "title": article.title,
            "url": article.url,
            "snippet": article.snippet,
            "published_at": article.published_at.isoformat() if article.published_at else None,
            "source_name": source.name,
            "bias_rating": source.bias_rating,
            "framing": link.source_snippet,
        }
        for link, article, source in _repo.get_story_articles(story_id)
    ]
    return out


@router.post("/pipeline/trigger")
async def trigger_pipeline() -> dict[str, Any]:
    """Run the pipeline and return its summary. Rejected if a run is active."""
    result = await run_in_threadpool(trigger_pipeline_run)
    return result.to_json()


@router.get("/pipeline/status")
def pipeline_status() -> dict[str, bool]:
    return {"running": get_runner().is_running}
