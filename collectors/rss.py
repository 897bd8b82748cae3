"""RSS/Atom collector using requests + feedparser."""

import calendar
import html
import logging
import re
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from time import struct_time
from typing import Any

import feedparser
import requests

from collectors.base import BaseCollector, FetchedArticle
from config import (
    FEED_MAX_AGE_HOURS,
    FEED_MAX_ENTRIES,
    FEED_TIMEOUT_SECONDS,
    FEED_USER_AGENT,
    SNIPPET_MAX_CHARS,
)
from db.models import Source

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": FEED_USER_AGENT,
    "Accept": "application/rss+xml, application/xml, text/xml, */*",
}


def _new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(_HEADERS)
    return session


def _strip_html(text: str) -> str:
    """Remove HTML tags, unescape entities and collapse whitespace."""
    text = re.sub(r"<[^>]+>", " ", text)
    return re.sub(r"\s+", " ", html.unescape(text)).strip()


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class RSSCollector(BaseCollector):
    """Collect recent entries from one source's RSS or Atom feed."""

    kind = "rss"

    def __init__(
        self,
        max_entries: int = FEED_MAX_ENTRIES,
        max_age_hours: int = FEED_MAX_AGE_HOURS,
        timeout: float = FEED_TIMEOUT_SECONDS,
        session_factory: Callable[[], requests.Session] = _new_session,
    ) -> None:
        self.max_entries = max_entries
        self.max_age = timedelta(hours=max_age_hours)
        self.timeout = timeout
        self._session_factory = session_factory
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """HTTP session owned by the calling thread."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._session_factory()
        return session

    @staticmethod
    def _parse_published(entry: Any) -> datetime | None:
        """Parse the publish date from a feed entry as aware UTC."""
        # feedparser normalizes *_parsed to UTC
        for field in ("published_parsed", "updated_parsed"):
            val = entry.get(field)
            if isinstance(val, struct_time):
                try:
                    return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
                except (ValueError, OverflowError, OSError):
                    pass
        # Fallback: raw string, RFC 822 first then ISO 8601
        for field in ("published", "updated"):
            raw = entry.get(field)
            if not raw:
                continue
            try:
                return _as_utc(parsedate_to_datetime(raw))
            except (ValueError, TypeError, IndexError):
                pass
            try:
                return _as_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
            except (ValueError, TypeError):
                pass
        return None

    @staticmethod
    def _extract_snippet(entry: Any) -> str:
        """Plain-text summary, falling back to raw content, truncated."""
        summary = entry.get("summary")
        if summary:
            text = _strip_html(summary)
            if text:
                return text[:SNIPPET_MAX_CHARS]
        for c in entry.get("content") or []:
            if c.get("value"):
                return c["value"][:SNIPPET_MAX_CHARS]
        return ""

    def _download(self, url: str) -> bytes:
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content

    def collect(self, source: Source, now: datetime | None = None) -> list[FetchedArticle]:
        """Fetch, filter and normalize one feed. Never raises."""
        if not source.rss_url or not source.is_active:
            return []

        now = now or datetime.now(timezone.utc)
        cutoff = now - self.max_age

        logger.info("[%s] Fetching feed: %s", source.name, source.rss_url)
        try:
            feed = feedparser.parse(self._download(source.rss_url))
            if feed.bozo and not feed.entries:
                logger.warning(
                    "[%s] Feed unparseable with no entries: %s", source.name, feed.get("bozo_exception")
                )
                return []

            articles: list[FetchedArticle] = []
            for entry in feed.entries:
                title = (entry.get("title") or "").strip()
                link = (entry.get("link") or "").strip()
                if not title or not link:
                    continue

                published_at = self._parse_published(entry)
                if published_at is None or published_at < cutoff:
                    continue

                articles.append(FetchedArticle(
                    source_id=source.id,
                    source_name=source.name,
                    bias_rating=source.bias_rating,
                    title=title,
                    url=link,
                    snippet=self._extract_snippet(entry),
                    published_at=published_at,
                ))
        except Exception as e:
            logger.warning("[%s] Failed to fetch feed: %s", source.name, e)
            return []

        articles.sort(key=lambda a: a.published_at, reverse=True)
        articles = articles[: self.max_entries]
        logger.info("[%s] Got %d recent articles", source.name, len(articles))
        return articles
