"""Storage operations used by the pipeline and the API.

Each call opens and closes its own session, so the pipeline never holds a
transaction across network I/O. Returned rows are detached but fully loaded.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from db.database import get_session
from db.models import Article, Source, Story, StoryArticle, utcnow

logger = logging.getLogger(__name__)


class DuplicateArticleError(Exception):
    """An article with the same URL is already stored."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Article already exists: {url}")
        self.url = url


class Repository:
    """SQLAlchemy-backed storage repository."""

    # --- Sources ---

    def list_sources(self) -> list[Source]:
        session = get_session()
        try:
            return session.query(Source).order_by(Source.id).all()
        finally:
            session.close()

    def get_source_by_name(self, name: str) -> Source | None:
        session = get_session()
        try:
            return session.query(Source).filter(Source.name == name).one_or_none()
        finally:
            session.close()

    def create_source(self, **fields: Any) -> Source:
        session = get_session()
        try:
            source = Source(**fields)
            session.add(source)
            session.commit()
            return source
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_source(self, source_id: int, **patch: Any) -> Source:
        """Apply a partial update. Raises LookupError for unknown ids."""
        session = get_session()
        try:
            source = session.get(Source, source_id)
            if source is None:
                raise LookupError(f"Source {source_id} not found")
            for key, value in patch.items():
                setattr(source, key, value)
            session.commit()
            return source
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Articles ---

    def find_article_by_url(self, url: str) -> Article | None:
        session = get_session()
        try:
            return session.query(Article).filter(Article.url == url).one_or_none()
        finally:
            session.close()

    def create_article(
        self,
        *,
        source_id: int,
        title: str,
        url: str,
        snippet: str | None,
        published_at: datetime,
        author: str | None = None,
        image_url: str | None = None,
    ) -> Article:
        """Insert an article. Raises DuplicateArticleError if the URL is taken."""
        session = get_session()
        try:
            article = Article(
                source_id=source_id,
                title=title,
                url=url,
                snippet=snippet,
                author=author,
                image_url=image_url,
                published_at=published_at,
                ingested_at=utcnow(),
            )
            session.add(article)
            session.commit()
            return article
        except IntegrityError as e:
            session.rollback()
            raise DuplicateArticleError(url) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Stories ---

    def create_story(self, **fields: Any) -> Story:
        session = get_session()
        try:
            story = Story(**fields)
            session.add(story)
            session.commit()
            return story
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_story_with_links(self, links: list[tuple[int, str]], **fields: Any) -> Story:
        """Insert a story and its (article_id, framing) links in one transaction."""
        session = get_session()
        try:
            story = Story(**fields)
            session.add(story)
            session.flush()
            for article_id, framing in links:
                session.add(StoryArticle(story_id=story.id, article_id=article_id, source_snippet=framing))
            session.commit()
            return story
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def link_article_to_story(self, story_id: int, article_id: int, framing: str) -> None:
        session = get_session()
        try:
            session.add(StoryArticle(story_id=story_id, article_id=article_id, source_snippet=framing))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list_stories(
        self,
        limit: int = 20,
        topic: str | None = None,
        region: str | None = None,
    ) -> list[Story]:
        """Latest published stories, newest first."""
        session = get_session()
        try:
            query = session.query(Story).filter(Story.status == "published")
            if topic:
                query = query.filter(Story.topic == topic)
            if region:
                query = query.filter(Story.region == region)
            return query.order_by(Story.published_at.desc(), Story.id.desc()).limit(limit).all()
        finally:
            session.close()

    def get_story(self, story_id: int) -> Story | None:
        session = get_session()
        try:
            return session.get(Story, story_id)
        finally:
            session.close()

    def get_story_articles(self, story_id: int) -> list[tuple[StoryArticle, Article, Source]]:
        """Linked articles for a story, each with its source."""
        session = get_session()
        try:
            rows = (
                session.query(StoryArticle, Article, Source)
                .join(Article, StoryArticle.article_id == Article.id)
                .join(Source, Article.source_id == Source.id)
                .filter(StoryArticle.story_id == story_id)
                .order_by(StoryArticle.id)
                .all()
            )
            return [tuple(row) for row in rows]
        finally:
            session.close()
