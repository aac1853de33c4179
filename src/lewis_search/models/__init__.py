"""Data models for the Lewis search service."""

from .request import SearchRequest, SearchRequestModel, QueryMode
from .result import SearchResponse
from .settings import ServiceSettings

__all__ = [
    "SearchRequest",
    "SearchRequestModel",
    "QueryMode",
    "SearchResponse",
    "ServiceSettings",
]
