"""XQuery engine interface and its Saxon implementation."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from saxonche import PySaxonApiError, PySaxonProcessor

from .exceptions import EvaluationError, QueryError, ConfigurationError

logger = logging.getLogger(__name__)

# Markers Saxon puts in messages for errors raised while compiling a query
STATIC_ERROR_MARKERS = ("XPST", "XQST", "Syntax error")


@dataclass
class PreparedQuery:
    """
    A query accepted by an engine and ready to execute.

    Attributes:
        text: The XQuery text
        handle: Engine-specific compiled form (None for engines that compile on execute)
    """
    text: str
    handle: Any = None


class XQueryEngine:
    """
    Interface of a document-query engine.

    Implementations evaluate XQuery text against XML documents and return
    each item of the result sequence serialized as a string. A result
    sequence holds engine state until it is exhausted or closed.
    """

    def prepare(self, query: str) -> PreparedQuery:
        """Parse a query. Raises QueryError on malformed syntax."""
        raise NotImplementedError

    def execute(self, prepared: PreparedQuery) -> Iterator[str]:
        """Evaluate a prepared query. Raises EvaluationError on runtime faults."""
        raise NotImplementedError

    def close(self) -> None:
        """Release engine resources."""

    def get_stats(self) -> Dict[str, Any]:
        return {"engine": type(self).__name__}


def classify_saxon_error(error: Exception) -> Exception:
    """Map a Saxon error to QueryError (static) or EvaluationError (dynamic)."""
    message = str(error)
    if any(marker in message for marker in STATIC_ERROR_MARKERS):
        return QueryError(f"Invalid query: {message}")
    return EvaluationError(f"Query evaluation failed: {message}")


class ResultSequence:
    """
    Single-pass cursor over an evaluated result.

    Holds the engine lock until the last item is read or close() is called.
    """

    def __init__(self, value: Any, lock: threading.Lock):
        self._value = value
        self._lock = lock
        self._size = value.size if value is not None else 0
        self._position = 0
        self._closed = False

    def __iter__(self) -> "ResultSequence":
        return self

    def __next__(self) -> str:
        if self._closed or self._position >= self._size:
            self.close()
            raise StopIteration

        try:
            item = self._value.item_at(self._position)
            fragment = str(item)
        except PySaxonApiError as e:
            self.close()
            raise EvaluationError(f"Failed to serialize result item {self._position}: {str(e)}")

        self._position += 1
        return fragment

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._value = None
        self._lock.release()


class SaxonXQueryEngine(XQueryEngine):
    """
    XQuery engine backed by Saxon (saxonche).

    One processor per engine. Evaluations are serialized: the engine lock is
    taken by execute() and held by the returned sequence until it is drained
    or closed, so an engine can be shared across worker threads.
    """

    def __init__(self, processor: Optional[PySaxonProcessor] = None):
        """
        Initialize the Saxon engine.

        Args:
            processor: Existing Saxon processor to reuse (a new one is created otherwise)

        Raises:
            ConfigurationError: If Saxon cannot be started
        """
        try:
            self._processor = processor or PySaxonProcessor(license=False)
        except PySaxonApiError as e:
            raise ConfigurationError(f"Failed to start Saxon processor: {str(e)}")

        self._lock = threading.Lock()
        self._closed = False
        self._stats = {
            'total_prepared': 0,
            'total_executed': 0
        }

        logger.info(f"Saxon XQuery engine initialized ({self._processor.version})")

    @property
    def is_closed(self) -> bool:
        return self._closed

    def prepare(self, query: str) -> PreparedQuery:
        """
        Create an XQuery processor holding the query text.

        Saxon compiles the query when it is first run, so syntax errors are
        reported by execute() as QueryError.

        Raises:
            QueryError: If the engine is closed or rejects the query text
        """
        if self._closed:
            raise QueryError("XQuery engine is closed")

        with self._lock:
            try:
                xquery_processor = self._processor.new_xquery_processor()
                xquery_processor.set_query_content(query)
            except PySaxonApiError as e:
                raise QueryError(f"Failed to prepare query: {str(e)}")
            self._stats['total_prepared'] += 1

        return PreparedQuery(text=query, handle=xquery_processor)

    def execute(self, prepared: PreparedQuery) -> ResultSequence:
        """
        Run a prepared query.

        Returns:
            Cursor over the serialized result items; the caller must drain or close it

        Raises:
            QueryError: If Saxon reports a static error while compiling
            EvaluationError: If evaluation fails
        """
        if self._closed:
            raise EvaluationError("XQuery engine is closed")

        self._lock.acquire()
        try:
            value = prepared.handle.run_query_to_value()
        except PySaxonApiError as e:
            self._lock.release()
            logger.error(f"Saxon failed on query: {prepared.text}")
            raise classify_saxon_error(e)
        except BaseException:
            self._lock.release()
            raise

        self._stats['total_executed'] += 1
        return ResultSequence(value, self._lock)

    def close(self) -> None:
        """Drop the processor; waits for a running evaluation to be released."""
        with self._lock:
            self._processor = None
            self._closed = True
        logger.info("Saxon XQuery engine closed")

    def get_stats(self) -> Dict[str, Any]:
        return {
            "engine": "saxon",
            "closed": self._closed,
            **self._stats
        }
