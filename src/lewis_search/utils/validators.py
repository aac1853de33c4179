"""Input validation utilities."""

import re
from pathlib import Path
from typing import Union

from ..models.request import SearchRequest
from ..core.exceptions import ValidationError, ConfigurationError

# Letters or underscore first, then word characters, dots and hyphens; one optional prefix.
XML_NAME_PATTERN = re.compile(r"^[^\W\d][\w.\-]*(?::[^\W\d][\w.\-]*)?$")


def validate_identifier(identifier: str) -> None:
    """
    Validate that an identifier can be spliced into a path step.
    
    Args:
        identifier: Element or attribute name
        
    Raises:
        ValidationError: If identifier is not a valid XML name
    """
    if not isinstance(identifier, str):
        raise ValidationError("Identifier must be a string")
    
    if not XML_NAME_PATTERN.match(identifier):
        raise ValidationError(f"Identifier is not a valid XML name: {identifier!r}")


def validate_search_request(request: SearchRequest, strict: bool = False) -> None:
    """
    Validate search request object.
    
    Args:
        request: Request to validate
        strict: Also reject control characters and identifiers that are not XML names
        
    Raises:
        ValidationError: If request is invalid
    """
    try:
        if not isinstance(request, SearchRequest):
            raise ValidationError("Invalid request type")
        
        if not strict:
            return

        for value in (request.identifier, request.search_term):
            if any(ord(ch) < 0x20 and ch not in "\t\n\r" for ch in value):
                raise ValidationError("Request contains control characters")
        
        if request.identifier:
            validate_identifier(request.identifier)
        
    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        raise ValidationError(f"Request validation failed: {str(e)}")


def validate_collection_path(path: Union[str, Path]) -> Path:
    """
    Validate the location of the document collection.
    
    Args:
        path: Path to the XML collection file
        
    Returns:
        Resolved path to the collection
        
    Raises:
        ConfigurationError: If the file is missing or unreadable
    """
    collection = Path(path)
    
    if not collection.exists():
        raise ConfigurationError(f"Collection file not found: {collection}")
    
    if not collection.is_file():
        raise ConfigurationError(f"Collection path is not a file: {collection}")
    
    if collection.suffix.lower() != ".xml":
        raise ConfigurationError(f"Collection must be an XML file: {collection}")
    
    return collection.resolve()
