from db.database import get_engine, get_session, init_db
from db.models import Article, Source, Story, StoryArticle
from db.repository import DuplicateArticleError, Repository

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "Article",
    "Source",
    "Story",
    "StoryArticle",
    "DuplicateArticleError",
    "Repository",
]
