"""
Reuters News Corpus Search

A search service over the Reuters-21578 news-wire collection (David Lewis'
distribution in XML form). Requests name an optional element or attribute
and an optional search term; matching records are returned as one XML
document built from an XQuery evaluated by Saxon.
"""

from .api.service import LewisSearchService
from .models.request import SearchRequest, QueryMode
from .models.result import SearchResponse
from .models.settings import ServiceSettings
from .core.engine import LewisSearchEngine
from .core.query_builder import QueryBuilder, build
from .core.assembler import ResultAssembler, assemble
from .core.exceptions import LewisSearchError, QueryError, EvaluationError

__version__ = "1.0.0"

__all__ = [
    "LewisSearchService",
    "LewisSearchEngine",
    "SearchRequest",
    "QueryMode",
    "SearchResponse",
    "ServiceSettings",
    "QueryBuilder",
    "build",
    "ResultAssembler",
    "assemble",
    "LewisSearchError",
    "QueryError",
    "EvaluationError",
]
