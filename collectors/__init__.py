from collectors.base import BaseCollector, FetchedArticle
from collectors.rss import RSSCollector

__all__ = [
    "BaseCollector",
    "FetchedArticle",
    "RSSCollector",
]
