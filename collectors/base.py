"""Base collector and the normalized record every collector returns."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from db.models import Source


@dataclass(frozen=True)
class FetchedArticle:
    """One normalized feed entry, not yet persisted."""

    source_id: int
    source_name: str
    bias_rating: str
    title: str
    url: str
    snippet: str
    published_at: datetime  # timezone-aware UTC


class BaseCollector(ABC):
    """Abstract base for all collectors. Collectors never write to storage."""

    kind: str  # Must be set by subclasses

    @abstractmethod
    def collect(self, source: Source, now: datetime | None = None) -> list[FetchedArticle]:
        """Fetch recent entries for one source. Must return [] on any failure."""
        ...
