"""
REST API for the Lewis search service.

``GET /?id=<name>&content=<text>`` returns the matching REUTERS records
wrapped in a single root element, as application/xml.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import Response

from .service import LewisSearchService
from ..models.request import SearchRequestModel
from ..models.settings import ServiceSettings
from ..core.exceptions import (
    LewisSearchError,
    QueryError,
    EvaluationError,
    ValidationError
)

logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml"


def get_service(request: Request) -> LewisSearchService:
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Search service not initialized")
    return service


def create_app(
    service: Optional[LewisSearchService] = None,
    settings: Optional[ServiceSettings] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Service to expose; created from settings (or LEWIS_* variables) otherwise

    The service is initialized on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        search_service = service or LewisSearchService(
            settings=settings or ServiceSettings.from_env()
        )
        await search_service.initialize()
        app.state.search_service = search_service
        logger.info("Search service initialized successfully")
        try:
            yield
        finally:
            app.state.search_service = None
            await search_service.close()
            logger.info("Search service closed")

    app = FastAPI(
        title="Reuters News Corpus Search API",
        description="Search the Reuters-21578 news-wire collection",
        version="1.0.0",
        lifespan=lifespan
    )

    @app.get("/", summary="Search Records", response_class=Response)
    async def search_records(
        id: str = Query("", description="Element or attribute name to search in"),
        content: str = Query("", description="Text to search for"),
        search_service: LewisSearchService = Depends(get_service)
    ):
        """Return the records matching the query parameters as XML."""
        try:
            request = SearchRequestModel(id=id, content=content).to_request()
            document = await search_service.search(request.identifier, request.search_term)
            return Response(content=document, media_type=XML_MEDIA_TYPE)

        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except (QueryError, EvaluationError) as e:
            logger.error(f"Search failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/health", summary="Health Check")
    async def health_check(search_service: LewisSearchService = Depends(get_service)):
        """Check the health of the search service."""
        return await search_service.health_check()

    @app.get("/stats", summary="Get Statistics")
    async def get_stats(search_service: LewisSearchService = Depends(get_service)):
        """Get search service statistics."""
        try:
            return await search_service.get_stats()
        except LewisSearchError as e:
            logger.error(f"Failed to get stats: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    return app
