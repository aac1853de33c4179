"""Utility modules for the Lewis search service."""

from .validators import validate_identifier, validate_search_request, validate_collection_path
from .logging_config import setup_logging, new_request_id, StructuredLogger

__all__ = [
    "validate_identifier",
    "validate_search_request",
    "validate_collection_path",
    "setup_logging",
    "new_request_id",
    "StructuredLogger",
]
