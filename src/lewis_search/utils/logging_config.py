"""Logging configuration for the Lewis search service."""

import logging
import sys
import uuid
from typing import Any, MutableMapping, Optional, Tuple

PACKAGE_LOGGER = "lewis_search"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_NO_TIME = "%(name)s - %(levelname)s - %(message)s"

# Per-request access lines from the HTTP stack drown out search logs
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Configure stdout logging for the service.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        include_timestamp: Whether the default format starts with a timestamp
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    if format_string is None:
        format_string = LOG_FORMAT if include_timestamp else LOG_FORMAT_NO_TIME

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        stream=sys.stdout,
        force=True
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(f"Logging configured with level: {level}")


def new_request_id() -> str:
    """Short random id tying together the log lines of one search."""
    return uuid.uuid4().hex[:12]


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that appends ``key=value`` context to every message.

    Example:
        log = StructuredLogger(__name__).with_context(request_id="ab12", mode="targeted")
        log.info("Search completed")  # Search completed [request_id=ab12 mode=targeted]
    """

    def __init__(self, name: str, context: Optional[MutableMapping[str, Any]] = None):
        super().__init__(logging.getLogger(name), dict(context or {}))

    @property
    def context(self) -> MutableMapping[str, Any]:
        return self.extra

    def with_context(self, **kwargs) -> 'StructuredLogger':
        """Return a logger carrying this logger's context plus ``kwargs``."""
        return StructuredLogger(self.logger.name, {**self.extra, **kwargs})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs

        context_str = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"{msg} [{context_str}]", kwargs
