"""
Metropolitan Museum of Art collection API integration.

This module wraps the three public endpoints the proxy relies on:

* ``/departments`` : the list of curatorial departments.
* ``/search`` : object identifiers matching a query, optionally limited
  to one department.
* ``/objects/{id}`` : the full record of a single object.

All requests go through one shared ``httpx.AsyncClient`` so connection
pooling is reused across requests. Failures are normalised into
``UpstreamError`` so callers can report them without leaking library
internals to the browser. Nothing is cached; every call hits the API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from .schemas import ErrorDetail


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

USER_AGENT = "metproxy/1.0 (+https://metmuseum.github.io/)"


class UpstreamError(Exception):
    """Raised when the Met API cannot be reached or answers badly."""

    kind = "upstream_error"

    def __init__(self, message: str, kind: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.status_code = status_code

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(kind=self.kind, message=self.message)


class UpstreamNotFound(UpstreamError):
    """The Met API answered 404."""

    kind = "not_found"


def create_http_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Build the shared async HTTP client used for all upstream calls.

    Redirects are followed so a moved endpoint still answers with JSON.
    """
    return httpx.AsyncClient(
        transport=transport,
        timeout=settings.upstream_timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )


def build_search_params(query: Optional[str] = None, department_id: Optional[str] = None) -> Dict[str, str]:
    """Query parameters for ``/search``.

    Only images are requested, and an omitted query becomes the ``*``
    wildcard so a department can be browsed without a search term.
    """
    params: Dict[str, str] = {}
    if department_id:
        params["departmentId"] = department_id
    params["hasImages"] = "true"
    params["q"] = query if query else "*"
    return params


class MetCollectionClient:
    """Thin async client for the Met collection API."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self._http = http_client
        self.base_url = base_url.rstrip("/")

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                raise UpstreamNotFound(f"{url} not found", status_code=status) from exc
            raise UpstreamError(
                f"{url} returned status {status}", kind="http_status", status_code=status
            ) from exc
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Timed out requesting {url}", kind="timeout") from exc
        except httpx.RequestError as exc:
            raise UpstreamError(f"Error requesting {url}: {exc}", kind="transport") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"{url} returned a non-JSON body", kind="invalid_response") from exc

    async def get_departments(self) -> Any:
        return await self._get_json("/departments")

    async def search(self, query: Optional[str] = None, department_id: Optional[str] = None) -> Any:
        """Run a search and return the upstream body untouched."""
        params = build_search_params(query, department_id)
        logger.info("fetching from %s/search with %s", self.base_url, params)
        return await self._get_json("/search", params=params)

    async def search_object_ids(
        self, query: Optional[str] = None, department_id: Optional[str] = None
    ) -> List[int]:
        """Return the candidate object IDs for a search, sorted ascending.

        The Met answers ``{"total": 0, "objectIDs": null}`` when nothing
        matches; that is reported as an empty list.
        """
        body = await self.search(query, department_id)
        if not isinstance(body, dict):
            raise UpstreamError("Search response is not a JSON object", kind="invalid_response")
        object_ids = body.get("objectIDs") or []
        if not isinstance(object_ids, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in object_ids
        ):
            raise UpstreamError("Search response has malformed objectIDs", kind="invalid_response")
        return sorted(object_ids)

    async def get_object(self, object_id: int) -> Dict[str, Any]:
        body = await self._get_json(f"/objects/{object_id}")
        if not isinstance(body, dict):
            raise UpstreamError(
                f"Object {object_id} response is not a JSON object", kind="invalid_response"
            )
        return body
