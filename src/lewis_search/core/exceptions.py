"""Custom exceptions for the Lewis search service."""


class LewisSearchError(Exception):
    """Base exception for Lewis search operations."""
    pass


class QueryError(LewisSearchError):
    """Exception raised when a query cannot be parsed or prepared."""
    pass


class EvaluationError(LewisSearchError):
    """Exception raised when the engine fails while evaluating a query."""
    pass


class ValidationError(LewisSearchError):
    """Exception raised during input validation."""
    pass


class ConfigurationError(LewisSearchError):
    """Exception raised for configuration issues."""
    pass


class SearchCancelledError(LewisSearchError):
    """Exception raised when a search is aborted while draining results."""
    pass
