"""
Database repositories for Prism.
"""

from .base_repository import BaseRepository
from .quote_repository import QuoteRepository
from .ignored_user_repository import IgnoredUserRepository
from .topic_repository import TopicRepository

__all__ = [
    "BaseRepository",
    "QuoteRepository",
    "IgnoredUserRepository",
    "TopicRepository",
]
