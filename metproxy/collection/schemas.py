"""
Pydantic schema definitions for the collection module.

Artwork records are relayed to the browser exactly as the Met API
returns them, so they are kept as plain dictionaries rather than being
forced through a model that would drop unknown fields. The models
below only describe the envelopes this service builds itself.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


ArtworkRecord = Dict[str, Any]


class PageResult(BaseModel):
    """One page of filtered artworks from ``/api/artworks``.

    ``total`` counts the raw search candidates before filtering, so it
    can be larger than the number of artworks reachable by paging.
    """

    page: int
    total: int
    artworks: List[ArtworkRecord] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Structured description of an upstream failure."""

    kind: str
    message: str


class DepartmentsError(BaseModel):
    message: str = "Error retrieving department data"
    error: ErrorDetail


class SearchError(BaseModel):
    error: ErrorDetail


class ArtworksError(BaseModel):
    error: str = "Internal server error"


class RouteNotFound(BaseModel):
    message: str = "Route not found"
