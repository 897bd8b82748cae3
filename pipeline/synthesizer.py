"""Synthesize one neutral story per cluster and persist it with its sources."""

import json
import logging
from typing import Any

from config import SYNTHESIS_MAX_TOKENS
from db.models import Story, utcnow
from db.repository import Repository
from llm.client import LLMClient, LLMError
from pipeline.models import Cluster, CoverageGap, NarrativeLens, Synthesis
from pipeline.prompts import SYNTHESIS_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def format_cluster(cluster: Cluster) -> str:
    return "\n\n".join(
        f'[{a.source_name} ({a.bias_rating})] "{a.title}"\n{a.snippet}'
        for a in cluster.articles
    )


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


def _score(value: Any) -> int | None:
    """Integer 0-100 or None. Numeric strings and floats are accepted."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        score = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return max(0, min(100, score))


def _lenses(value: Any) -> list[NarrativeLens]:
    if not isinstance(value, list):
        return []
    lenses = []
    for item in value:
        if not isinstance(item, dict) or not _text(item.get("sourceName")):
            continue
        lenses.append(NarrativeLens(
            source_name=_text(item.get("sourceName")),
            bias_rating=_text(item.get("biasRating")),
            framing=_text(item.get("framing")),
            tone=_text(item.get("tone")),
            emphasis=_text(item.get("emphasis")),
            omissions=_text(item.get("omissions")),
            word_choice=_text(item.get("wordChoice")),
        ))
    return lenses


def _gaps(value: Any) -> list[CoverageGap]:
    if not isinstance(value, list):
        return []
    gaps = []
    for item in value:
        if not isinstance(item, dict) or not _text(item.get("fact")):
            continue
        gaps.append(CoverageGap(
            fact=_text(item.get("fact")),
            covered_by=_text_list(item.get("coveredBy")),
            missed_by=_text_list(item.get("missedBy")),
            significance=_text(item.get("significance")),
        ))
    return gaps


def parse_synthesis(result: Any) -> Synthesis | None:
    """Coerce a raw model response. None when headline or summary is missing."""
    if not isinstance(result, dict):
        return None
    headline = _text(result.get("headline"))
    summary = _text(result.get("summary"))
    if not headline or not summary:
        return None
    return Synthesis(
        headline=headline,
        summary=summary,
        key_facts=_text_list(result.get("keyFacts")),
        divergence_summary=_text(result.get("divergenceSummary")),
        consensus_score=_score(result.get("consensusScore")),
        narrative_lens=_lenses(result.get("narrativeLens")),
        coverage_gaps=_gaps(result.get("coverageGaps")),
    )


def _persist(cluster: Cluster, synthesis: Synthesis, repo: Repository) -> Story:
    """Store the story and every resolvable member link, all or nothing."""
    links: list[tuple[int, str]] = []
    for item in cluster.articles:
        article = repo.find_article_by_url(item.url)
        if article is None:
            # Ingestion lost this one; the story stands without it.
            logger.debug("No stored article for %s, not linked", item.url)
            continue
        framing = synthesis.framing_for(item.source_name) or f"Covered by {item.source_name}"
        links.append((article.id, framing))

    story = repo.create_story_with_links(
        links,
        headline=synthesis.headline,
        summary=synthesis.summary,
        topic=cluster.topic,
        region=cluster.region,
        key_facts=json.dumps(synthesis.key_facts),
        divergence_summary=synthesis.divergence_summary,
        consensus_score=synthesis.consensus_score,
        narrative_lens=json.dumps([lens.to_json() for lens in synthesis.narrative_lens]),
        coverage_gaps=json.dumps([gap.to_json() for gap in synthesis.coverage_gaps]),
        status="published",
        published_at=utcnow(),
    )
    logger.info("Created story %d: %r with %d linked articles", story.id, story.headline, len(links))
    return story


def synthesize_story(cluster: Cluster, llm: LLMClient, repo: Repository) -> Story | None:
    """Synthesize and store one story. Returns None if this cluster failed."""
    try:
        result = llm.complete_json(
            SYNTHESIS_SYSTEM_PROMPT,
            format_cluster(cluster),
            max_tokens=SYNTHESIS_MAX_TOKENS,
        )
    except LLMError as e:
        logger.error("Failed to synthesize story: %s", e)
        return None
    except Exception:
        logger.exception("Unexpected error synthesizing story")
        return None

    synthesis = parse_synthesis(result)
    if synthesis is None:
        logger.error("Model returned incomplete synthesis (missing headline or summary)")
        return None

    try:
        return _persist(cluster, synthesis, repo)
    except Exception:
        logger.exception("Failed to store synthesized story %r", synthesis.headline)
        return None
