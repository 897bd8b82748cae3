"""Keep the sources table in step with the curated registry."""

import logging

from config import SOURCE_REGISTRY
from db.repository import Repository

logger = logging.getLogger(__name__)


def sync_source_registry(
    repo: Repository,
    registry: dict[str, dict[str, str]] | None = None,
) -> tuple[int, int]:
    """Patch drifted feed URLs and add missing registry sources.

    Sources are never deleted; ones absent from the registry are left alone.
    Returns (updated, created).
    """
    registry = SOURCE_REGISTRY if registry is None else registry
    updated = 0
    created = 0

    for source in repo.list_sources():
        entry = registry.get(source.name)
        if entry and source.rss_url != entry["rss_url"]:
            repo.update_source(source.id, rss_url=entry["rss_url"])
            logger.info("[%s] Updated feed URL", source.name)
            updated += 1

    for name, entry in registry.items():
        if repo.get_source_by_name(name) is None:
            repo.create_source(
                name=name,
                url=entry["url"],
                rss_url=entry["rss_url"],
                bias_rating=entry["bias_rating"],
                is_active=True,
            )
            logger.info("[%s] Added new source", name)
            created += 1

    logger.info("Source registry sync: %d updated, %d created", updated, created)
    return updated, created
