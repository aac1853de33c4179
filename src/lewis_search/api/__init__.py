"""Service and HTTP interfaces."""

from .service import LewisSearchService

__all__ = ["LewisSearchService"]
