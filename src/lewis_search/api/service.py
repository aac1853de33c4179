"""High-level API service for Lewis collection search."""

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Any, Optional, Union, AsyncContextManager
from contextlib import asynccontextmanager

from ..core.engine import LewisSearchEngine
from ..core.query_builder import QueryBuilder
from ..core.assembler import ResultAssembler
from ..core.xquery import XQueryEngine, SaxonXQueryEngine
from ..models.request import SearchRequest
from ..models.result import SearchResponse
from ..models.settings import ServiceSettings
from ..utils.logging_config import setup_logging, new_request_id, StructuredLogger
from ..utils.validators import validate_collection_path
from ..core.exceptions import LewisSearchError

logger = logging.getLogger(__name__)


class LewisSearchService:
    """
    High-level service interface for searching the news-wire collection.

    Owns the XQuery engine handle for its whole lifetime and evaluates
    each request on a worker thread, so the async caller never blocks on
    query evaluation.
    """

    def __init__(
        self,
        collection_path: Optional[Union[str, Path]] = None,
        max_workers: int = 4,
        escape_literals: bool = False,
        root_tag: str = "LEWIS",
        log_level: str = "INFO",
        xquery_engine: Optional[XQueryEngine] = None,
        settings: Optional[ServiceSettings] = None
    ):
        """
        Initialize the Lewis search service.

        Args:
            collection_path: Path to the XML collection
            max_workers: Number of worker threads
            escape_literals: Escape search terms and validate identifiers
            root_tag: Root element of response documents
            log_level: Logging level
            xquery_engine: Engine handle to use instead of starting Saxon
            settings: Complete settings; overrides the individual arguments
        """
        if settings is None:
            settings = ServiceSettings(
                collection_path=collection_path or ServiceSettings().collection_path,
                max_workers=max_workers,
                escape_literals=escape_literals,
                root_tag=root_tag,
                log_level=log_level
            )
        self.settings = settings

        # Setup logging
        setup_logging(level=settings.log_level)

        self.collection_path = Path(settings.collection_path)
        self.xquery_engine = xquery_engine
        self._owns_engine = xquery_engine is None
        self.engine: Optional[LewisSearchEngine] = None
        self.executor: Optional[ThreadPoolExecutor] = None

        self._initialized = False
        logger.info("Lewis search service created")

    async def initialize(self) -> None:
        """
        Check the collection and acquire the XQuery engine handle.

        Raises:
            LewisSearchError: If the collection or the engine is unavailable
        """
        try:
            self.collection_path = validate_collection_path(self.collection_path)

            if self.xquery_engine is None:
                self.xquery_engine = SaxonXQueryEngine()

            self.engine = LewisSearchEngine(
                xquery_engine=self.xquery_engine,
                collection_path=self.collection_path,
                query_builder=QueryBuilder(escape_literals=self.settings.escape_literals),
                assembler=ResultAssembler(root_tag=self.settings.root_tag)
            )
            self.executor = ThreadPoolExecutor(
                max_workers=self.settings.max_workers,
                thread_name_prefix="lewis-search"
            )

            self._initialized = True
            logger.info("Service initialization complete")

        except LewisSearchError as e:
            logger.error(f"Failed to initialize service: {str(e)}")
            raise
        except Exception as e:
            logger.error(f"Failed to initialize service: {str(e)}")
            raise LewisSearchError(f"Service initialization failed: {str(e)}")

    async def search(self, identifier: str = "", search_term: str = "") -> str:
        """
        Search the collection and return the XML response document.

        Args:
            identifier: Element or attribute name to search in ("" = whole record)
            search_term: Text to search for ("" = every record)

        Returns:
            Root-wrapped XML of all matching records

        Raises:
            QueryError: If the query cannot be prepared
            EvaluationError: If evaluation fails
        """
        request = SearchRequest(identifier=identifier, search_term=search_term)
        response = await self.search_request(request)
        return response.document

    async def search_request(self, request: SearchRequest) -> SearchResponse:
        """
        Run a search request on a worker thread.

        Cancelling the awaiting task stops the worker at the next result
        fragment and releases the engine.
        """
        self._check_initialized()

        request_id = new_request_id()
        log = StructuredLogger(__name__).with_context(request_id=request_id)
        cancel_event = threading.Event()
        loop = asyncio.get_running_loop()

        try:
            response = await loop.run_in_executor(
                self.executor, self.engine.search, request, cancel_event, request_id
            )
            log.debug(f"Search returned {response.fragment_count} records")
            return response

        except asyncio.CancelledError:
            cancel_event.set()
            log.info("Search cancelled by caller")
            raise
        except LewisSearchError as e:
            log.error(f"Search failed: {str(e)}")
            raise

    async def get_stats(self) -> Dict[str, Any]:
        """Get service and engine statistics."""
        self._check_initialized()

        return {
            'service': {
                'initialized': self._initialized,
                'collection_path': str(self.collection_path),
                'max_workers': self.settings.max_workers
            },
            'engine': self.engine.get_stats()
        }

    async def health_check(self) -> Dict[str, Any]:
        """Perform comprehensive health check."""
        try:
            if not self._initialized:
                return {
                    'status': 'not_initialized',
                    'message': 'Service not initialized'
                }

            return self.engine.health_check()

        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return {
                'status': 'error',
                'message': str(e)
            }

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise LewisSearchError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Wait for running searches, then release the engine handle."""
        try:
            self._initialized = False

            if self.executor is not None:
                executor, self.executor = self.executor, None
                # Draining running searches must not block the event loop
                await asyncio.get_running_loop().run_in_executor(None, executor.shutdown)

            if self._owns_engine and self.xquery_engine is not None:
                self.xquery_engine.close()
                self.xquery_engine = None

            logger.info("Service closed successfully")

        except Exception as e:
            logger.error(f"Error during service shutdown: {str(e)}")

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        collection_path: Optional[Union[str, Path]] = None,
        **kwargs
    ) -> AsyncContextManager['LewisSearchService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            collection_path: Path to the XML collection
            **kwargs: Additional service configuration

        Yields:
            Initialized Lewis search service
        """
        service = cls(collection_path=collection_path, **kwargs)

        try:
            await service.initialize()
            yield service
        finally:
            await service.close()
