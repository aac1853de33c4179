"""Search request data model."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, Field, validator


class QueryMode(str, Enum):
    """Query modes selected from the presence of identifier and search term."""
    UNFILTERED = "unfiltered"
    FULL_TEXT = "full_text"
    TARGETED = "targeted"


@dataclass(frozen=True)
class SearchRequest:
    """
    Search request over the news-wire collection.
    
    Attributes:
        identifier: Element or attribute name to search in ("" = whole record)
        search_term: Text to look for ("" = no filter)
    """
    identifier: str = ""
    search_term: str = ""
    
    def __post_init__(self) -> None:
        """Normalize missing values to empty strings."""
        if self.identifier is None:
            object.__setattr__(self, "identifier", "")
        if self.search_term is None:
            object.__setattr__(self, "search_term", "")
        if not isinstance(self.identifier, str):
            raise ValueError("Identifier must be a string")
        if not isinstance(self.search_term, str):
            raise ValueError("Search term must be a string")
    
    @property
    def mode(self) -> QueryMode:
        """Query mode this request resolves to."""
        if self.search_term == "":
            return QueryMode.UNFILTERED
        if self.identifier == "":
            return QueryMode.FULL_TEXT
        return QueryMode.TARGETED


class SearchRequestModel(BaseModel):
    """Pydantic model for request validation in API contexts."""
    
    id: Optional[str] = Field("", description="Element or attribute name to search in")
    content: Optional[str] = Field("", description="Text to search for")
    
    @validator('id')
    def validate_id(cls, v: Optional[str]) -> str:
        """Missing id means no identifier; other values pass through unchanged."""
        return v or ""
    
    @validator('content')
    def validate_content(cls, v: Optional[str]) -> str:
        """Missing content means no search term."""
        return v or ""
    
    def to_request(self) -> SearchRequest:
        """Convert to SearchRequest dataclass."""
        return SearchRequest(
            identifier=self.id,
            search_term=self.content
        )
