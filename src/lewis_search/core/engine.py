"""Main Lewis search engine implementation."""

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..models.request import SearchRequest
from ..models.result import SearchResponse
from ..utils.validators import validate_search_request
from ..utils.logging_config import StructuredLogger, new_request_id
from .query_builder import QueryBuilder
from .assembler import ResultAssembler
from .xquery import XQueryEngine
from .exceptions import LewisSearchError, EvaluationError, SearchCancelledError

logger = logging.getLogger(__name__)


class LewisSearchEngine:
    """
    Search over the Reuters news-wire collection.

    Turns a request into an XQuery, evaluates it on the shared engine handle
    and frames the matching records in one XML document. Requests share no
    state except the engine handle and the statistics counters.
    """

    def __init__(
        self,
        xquery_engine: XQueryEngine,
        collection_path: Union[str, Path],
        query_builder: Optional[QueryBuilder] = None,
        assembler: Optional[ResultAssembler] = None
    ):
        """
        Initialize the search engine.

        Args:
            xquery_engine: Engine handle owned by the caller; not closed by this class
            collection_path: Path to the XML collection
            query_builder: Query builder (default: unescaped templates)
            assembler: Result assembler (default: <LEWIS> root)
        """
        self.xquery_engine = xquery_engine
        self.collection_path = Path(collection_path)
        self.query_builder = query_builder or QueryBuilder()
        self.assembler = assembler or ResultAssembler()

        self._stats_lock = threading.Lock()
        self._stats = {
            'total_searches': 0,
            'failed_searches': 0,
            'total_fragments': 0,
            'avg_search_time': 0.0
        }
        self._log = StructuredLogger(__name__)

        logger.info(f"Lewis search engine initialized for {self.collection_path}")

    @property
    def collection_locator(self) -> str:
        """URI of the collection as passed to doc()."""
        return self.collection_path.resolve().as_uri()

    def build_query(self, request: SearchRequest) -> str:
        return self.query_builder.build(
            request.identifier,
            request.search_term,
            self.collection_locator
        )

    def search(
        self,
        request: SearchRequest,
        cancel_event: Optional[threading.Event] = None,
        request_id: Optional[str] = None
    ) -> SearchResponse:
        """
        Run one search request.

        Args:
            request: Identifier and search term
            cancel_event: Set by the caller to abort between result fragments
            request_id: Id attached to log lines (generated when omitted)

        Returns:
            Response with the assembled document

        Raises:
            QueryError: If the engine rejects the query
            EvaluationError: If evaluation or result reading fails
            SearchCancelledError: If cancel_event is set mid-drain
        """
        start_time = time.perf_counter()
        log = self._log.with_context(
            request_id=request_id or new_request_id(),
            mode=request.mode.value
        )

        try:
            validate_search_request(request, strict=self.query_builder.escape_literals)

            query = self.build_query(request)
            log.debug(f"Evaluating query: {query}")
            prepared = self.xquery_engine.prepare(query)
            fragments = self.xquery_engine.execute(prepared)
            document, count = self.assembler.assemble_counted(fragments, cancel_event)

        except SearchCancelledError as e:
            self._record_failure()
            log.warning(str(e))
            raise
        except LewisSearchError as e:
            self._record_failure()
            log.error(f"Search failed: {str(e)}")
            raise
        except Exception as e:
            self._record_failure()
            log.error(f"Search failed: {str(e)}")
            raise EvaluationError(f"Search failed: {str(e)}") from e

        search_time = time.perf_counter() - start_time
        self._update_search_stats(search_time, count)

        log.info(f"Search completed: {count} records in {search_time:.3f}s")
        return SearchResponse(
            request=request,
            query=query,
            document=document,
            fragment_count=count,
            search_time=search_time
        )

    def search_document(self, identifier: str = "", search_term: str = "") -> str:
        """Run a search and return only the XML document."""
        request = SearchRequest(identifier=identifier, search_term=search_term)
        return self.search(request).document

    def _record_failure(self) -> None:
        with self._stats_lock:
            self._stats['failed_searches'] += 1

    def _update_search_stats(self, search_time: float, fragment_count: int) -> None:
        """Update search performance statistics."""
        with self._stats_lock:
            self._stats['total_searches'] += 1
            self._stats['total_fragments'] += fragment_count

            # Update rolling average
            total_searches = self._stats['total_searches']
            current_avg = self._stats['avg_search_time']
            self._stats['avg_search_time'] = (
                (current_avg * (total_searches - 1) + search_time) / total_searches
            )

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics."""
        with self._stats_lock:
            stats = dict(self._stats)

        return {
            **stats,
            'collection_path': str(self.collection_path),
            'escape_literals': self.query_builder.escape_literals,
            'root_tag': self.assembler.root_tag,
            'xquery': self.xquery_engine.get_stats()
        }

    def health_check(self) -> Dict[str, Any]:
        """Perform health check of the search engine."""
        try:
            is_ready = self.collection_path.is_file()

            return {
                'status': 'healthy' if is_ready else 'not_ready',
                'is_ready': is_ready,
                'stats': self.get_stats(),
                'timestamp': time.time()
            }

        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': time.time()
            }
