"""Service configuration model."""

import os
from pathlib import Path
from typing import Mapping, Optional
from pydantic import BaseModel, Field, validator

# Collection file of David Lewis' Reuters-21578 distribution, in its valid XML form
DEFAULT_COLLECTION = "reut2-003.xml"

ENV_PREFIX = "LEWIS_"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ServiceSettings(BaseModel):
    """Settings for the Lewis search service."""
    
    collection_path: Path = Field(Path(DEFAULT_COLLECTION), description="XML collection to search")
    max_workers: int = Field(4, ge=1, le=64, description="Worker threads for query evaluation")
    escape_literals: bool = Field(False, description="Escape search terms and validate identifiers")
    root_tag: str = Field("LEWIS", min_length=1, description="Root element of response documents")
    log_level: str = Field("INFO", description="Logging level")
    
    @validator('log_level')
    def validate_log_level(cls, v: str) -> str:
        """Only standard logging levels are accepted."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @validator('root_tag')
    def validate_root_tag(cls, v: str) -> str:
        if not v.replace("_", "").replace("-", "").isalnum() or v[0].isdigit():
            raise ValueError(f"Root tag is not a valid element name: {v}")
        return v
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ServiceSettings':
        """
        Load settings from LEWIS_* environment variables.
        
        Args:
            environ: Mapping to read instead of os.environ
        """
        environ = os.environ if environ is None else environ
        values = {}
        
        for name in cls.__fields__:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in environ:
                values[name] = environ[key]
        
        return cls(**values)
