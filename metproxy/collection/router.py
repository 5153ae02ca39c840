"""
Route definitions for the collection API.

Endpoints under /api:
- GET  /departments : Met department list, relayed verbatim
- GET  /search      : Met search results, relayed verbatim
- GET  /artworks    : one page of filtered artwork records
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..config import Settings
from .fetcher import ArtworkFetcher
from .met_service import MetCollectionClient, UpstreamError
from .schemas import ArtworksError, DepartmentsError, ErrorDetail, PageResult, SearchError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["collection"])

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def parse_positive_int(value: Optional[str], default: int) -> int:
    """Parse a query-string integer leniently.

    A leading integer is accepted (``"2abc"`` gives 2). Missing,
    unparseable, zero or negative values fall back to ``default``.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    number = int(match.group())
    return number if number > 0 else default


# ---------------------------------------------------------------------------
# Dependencies
#
# The HTTP client and settings are created once in the application
# lifespan and stored on ``app.state``. Tests replace these through
# ``app.dependency_overrides``.

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_met_client(request: Request) -> MetCollectionClient:
    return request.app.state.met_client


def get_fetcher(
    client: MetCollectionClient = Depends(get_met_client),
    settings: Settings = Depends(get_app_settings),
) -> ArtworkFetcher:
    return ArtworkFetcher(
        client,
        excluded_ids=settings.excluded_object_ids,
        blocked_terms=settings.blocked_tag_terms,
        batch_size=settings.batch_size,
    )


def _unexpected_detail(exc: Exception) -> ErrorDetail:
    return ErrorDetail(kind="internal_error", message=str(exc) or type(exc).__name__)


@router.get("/departments")
async def list_departments(client: MetCollectionClient = Depends(get_met_client)):
    try:
        return await client.get_departments()
    except UpstreamError as exc:
        logger.error("Error retrieving department data: %s", exc)
        detail = exc.to_detail()
    except Exception as exc:
        logger.exception("Unexpected error retrieving department data")
        detail = _unexpected_detail(exc)
    return JSONResponse(status_code=500, content=DepartmentsError(error=detail).model_dump())


@router.get("/search")
async def search(
    q: Optional[str] = Query(default=None, description="Search term; '*' when omitted"),
    department_id: Optional[str] = Query(default=None, alias="departmentId"),
    client: MetCollectionClient = Depends(get_met_client),
):
    try:
        return await client.search(q, department_id)
    except UpstreamError as exc:
        logger.error("Search failed: %s", exc)
        detail = exc.to_detail()
    except Exception as exc:
        logger.exception("Unexpected error during search")
        detail = _unexpected_detail(exc)
    return JSONResponse(status_code=500, content=SearchError(error=detail).model_dump())


@router.get("/artworks", response_model=PageResult)
async def list_artworks(
    q: Optional[str] = Query(default=None, description="Search term; '*' when omitted"),
    department_id: Optional[str] = Query(default=None, alias="departmentId"),
    page: Optional[str] = Query(default=None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(default=None, description="Artworks per page"),
    fetcher: ArtworkFetcher = Depends(get_fetcher),
    settings: Settings = Depends(get_app_settings),
):
    """
    Returns one page of displayable artworks.

    ``page`` and ``limit`` are parsed leniently and default to 1 and
    the configured page size. Failures are reported as
    ``{"error": "Internal server error"}`` with
    ``settings.artworks_error_status`` (200 unless configured).
    """
    page_number = parse_positive_int(page, 1)
    page_size = parse_positive_int(limit, settings.default_limit)
    try:
        return await fetcher.get_page(q, department_id, page_number, page_size)
    except Exception:
        logger.exception("Error building artworks page %s", page_number)
        return JSONResponse(
            status_code=settings.artworks_error_status,
            content=ArtworksError().model_dump(),
        )
