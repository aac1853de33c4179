"""Core components for the Lewis search service."""

from .engine import LewisSearchEngine
from .query_builder import QueryBuilder, build, select_mode
from .assembler import ResultAssembler, assemble
from .xquery import XQueryEngine, PreparedQuery, SaxonXQueryEngine
from .exceptions import (
    LewisSearchError,
    QueryError,
    EvaluationError,
    ValidationError,
    ConfigurationError,
    SearchCancelledError
)

__all__ = [
    "LewisSearchEngine",
    "QueryBuilder",
    "build",
    "select_mode",
    "ResultAssembler",
    "assemble",
    "XQueryEngine",
    "PreparedQuery",
    "SaxonXQueryEngine",
    "LewisSearchError",
    "QueryError",
    "EvaluationError",
    "ValidationError",
    "ConfigurationError",
    "SearchCancelledError"
]
