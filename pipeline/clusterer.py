"""Group fetched articles into per-event clusters with one model call."""

import logging
from typing import Any

from collectors.base import FetchedArticle
from config import CLUSTER_MAX_TOKENS, DEFAULT_REGION, DEFAULT_TOPIC, REGIONS, TOPICS
from llm.client import LLMClient, LLMError
from pipeline.models import Cluster
from pipeline.prompts import CLUSTER_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

MIN_CLUSTER_ARTICLES = 2
MIN_CLUSTER_SOURCES = 2


def format_article_listing(articles: list[FetchedArticle]) -> str:
    """One indexed line per article: index, source, title, snippet prefix."""
    return "\n".join(
        f'{i}: [{a.source_name}] "{a.title}" - {a.snippet[:150]}'
        for i, a in enumerate(articles)
    )


def _raw_groups(result: Any) -> list[Any]:
    if isinstance(result, dict):
        groups = result.get("groups")
        return groups if isinstance(groups, list) else []
    if isinstance(result, list):
        return result
    return []


def _resolve_indices(raw: Any, count: int) -> list[int]:
    """Keep in-range integer indices, first occurrence wins."""
    if not isinstance(raw, list):
        return []
    seen: list[int] = []
    for i in raw:
        # bool is an int subclass
        if isinstance(i, bool) or not isinstance(i, int):
            continue
        if 0 <= i < count and i not in seen:
            seen.append(i)
    return seen


def _choice(value: Any, allowed: tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def build_clusters(result: Any, articles: list[FetchedArticle]) -> list[Cluster]:
    """Turn an untrusted model response into gate-passing clusters.

    A group survives only with at least two articles from at least two
    distinct sources after bad indices are dropped.
    """
    clusters: list[Cluster] = []
    for group in _raw_groups(result):
        if not isinstance(group, dict):
            continue
        indices = _resolve_indices(group.get("articleIndices"), len(articles))
        members = [articles[i] for i in indices]
        if len(members) < MIN_CLUSTER_ARTICLES:
            continue
        if len({a.source_id for a in members}) < MIN_CLUSTER_SOURCES:
            continue

        headline = group.get("suggestedHeadline")
        clusters.append(Cluster(
            topic=_choice(group.get("topic"), TOPICS, DEFAULT_TOPIC),
            region=_choice(group.get("region"), REGIONS, DEFAULT_REGION),
            articles=members,
            suggested_headline=headline if isinstance(headline, str) else "",
        ))
    return clusters


def cluster_articles(articles: list[FetchedArticle], llm: LLMClient) -> list[Cluster]:
    """Ask the model to group articles by event. Returns [] on any failure."""
    if not articles:
        return []

    try:
        result = llm.complete_json(
            CLUSTER_SYSTEM_PROMPT,
            format_article_listing(articles),
            max_tokens=CLUSTER_MAX_TOKENS,
        )
    except LLMError as e:
        logger.error("Failed to group articles: %s", e)
        return []
    except Exception:
        logger.exception("Unexpected error grouping articles")
        return []

    clusters = build_clusters(result, articles)
    logger.info(
        "Grouped %d articles into %d story clusters (%d proposed)",
        len(articles), len(clusters), len(_raw_groups(result)),
    )
    return clusters
