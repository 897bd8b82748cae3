"""Persist fetched articles that have not been seen before."""

import logging
from datetime import datetime, timezone

from collectors.base import FetchedArticle
from db.models import Article
from db.repository import DuplicateArticleError, Repository

logger = logging.getLogger(__name__)


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def ingest_articles(fetched: list[FetchedArticle], repo: Repository) -> list[Article]:
    """Insert articles whose URL is not stored yet. Returns the new rows.

    URL is the only identity: a repeated URL with a different title is the
    same article. A lost insert race is treated like any other duplicate.
    """
    created: list[Article] = []
    for item in fetched:
        if repo.find_article_by_url(item.url) is not None:
            continue
        try:
            article = repo.create_article(
                source_id=item.source_id,
                title=item.title,
                url=item.url,
                snippet=item.snippet,
                published_at=_naive_utc(item.published_at),
            )
        except DuplicateArticleError:
            logger.debug("Duplicate skipped: %s", item.url)
            continue
        created.append(article)

    logger.info("Ingested %d new articles (of %d fetched)", len(created), len(fetched))
    return created
