"""Search response data model."""

from typing import Dict, Any
from dataclasses import dataclass

from .request import SearchRequest, QueryMode


@dataclass(frozen=True)
class SearchResponse:
    """
    Assembled response for one search request.
    
    Attributes:
        request: The request that produced this response
        query: XQuery text evaluated for the request
        document: Root-wrapped XML response body
        fragment_count: Number of records framed in the document
        search_time: Wall-clock seconds spent building, evaluating and assembling
    """
    request: SearchRequest
    query: str
    document: str
    fragment_count: int
    search_time: float = 0.0
    
    def __post_init__(self) -> None:
        """Validate search response."""
        if self.fragment_count < 0:
            raise ValueError("Fragment count cannot be negative")
        if self.search_time < 0:
            raise ValueError("Search time cannot be negative")
    
    @property
    def mode(self) -> QueryMode:
        return self.request.mode
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert response metadata to a dictionary (the document body is left out)."""
        return {
            "identifier": self.request.identifier,
            "search_term": self.request.search_term,
            "mode": self.mode.value,
            "query": self.query,
            "fragment_count": self.fragment_count,
            "search_time": round(self.search_time, 4),
            "document_length": len(self.document)
        }
