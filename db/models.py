"""SQLAlchemy models for meridian."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class Source(Base):
    """A monitored publication."""

    __tablename__ = "sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    url: Mapped[str] = mapped_column(String, nullable=False)
    rss_url: Mapped[str | None] = mapped_column(String)  # no feed -> never fetched
    bias_rating: Mapped[str] = mapped_column(String(20), nullable=False, default="unrated")
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Source(id={self.id}, name={self.name!r}, bias={self.bias_rating!r})>"


class Article(Base):
    """One fetched feed item."""

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    source_id: Mapped[int] = mapped_column(ForeignKey("sources.id"), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    url: Mapped[str] = mapped_column(String, nullable=False, unique=True)  # dedup key
    snippet: Mapped[str | None] = mapped_column(Text)
    author: Mapped[str | None] = mapped_column(String)
    image_url: Mapped[str | None] = mapped_column(String)
    published_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ingested_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_article_source", "source_id"),
        Index("idx_article_published", "published_at"),
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, source_id={self.source_id}, title={self.title!r})>"


class Story(Base):
    """A synthesized cross-source narrative."""

    __tablename__ = "stories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    headline: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text)
    topic: Mapped[str] = mapped_column(String(50), nullable=False)
    region: Mapped[str | None] = mapped_column(String(30), default="us")
    key_facts: Mapped[str | None] = mapped_column(Text)  # JSON array of strings
    divergence_summary: Mapped[str | None] = mapped_column(Text)
    consensus_score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0-100
    narrative_lens: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON array of objects
    coverage_gaps: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON array of objects
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    published_at: Mapped[datetime | None] = mapped_column(DateTime)

    __table_args__ = (
        Index("idx_story_published", "published_at"),
        Index("idx_story_topic", "topic"),
    )

    def __repr__(self) -> str:
        return f"<Story(id={self.id}, status={self.status!r}, headline={self.headline!r})>"


class StoryArticle(Base):
    """Links an article to a story with the outlet's framing."""

    __tablename__ = "story_articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    story_id: Mapped[int] = mapped_column(ForeignKey("stories.id", ondelete="CASCADE"), nullable=False)
    article_id: Mapped[int] = mapped_column(ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    source_snippet: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("idx_story_articles_story", "story_id"),
    )
