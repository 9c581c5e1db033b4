"""
External source clients: Wikipedia, arXiv and CrossRef.

Each client absorbs its own failures and returns None or an empty tuple.
"""

from .arxiv import ArXivClient
from .base_client import BaseAPIClient
from .crossref import CrossRefClient
from .wikipedia import WikipediaClient

__all__ = [
    "ArXivClient",
    "BaseAPIClient",
    "CrossRefClient",
    "WikipediaClient",
]
