"""
Paginated, filtered artwork retrieval.

The Met search endpoint only returns object identifiers, and many of
the objects behind them are unsuitable for display (no image, withheld
by curators, or tagged with a blocked subject). ``ArtworkFetcher``
therefore walks the sorted identifier list in fixed-size windows,
fetching each window's records concurrently and keeping only the valid
ones, until a page is full or the list runs out.

Page offsets are positions in the raw identifier list:
``(page - 1) * limit``. When filtering drops records, page ``n + 1``
does not necessarily resume exactly where page ``n`` stopped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AbstractSet, List, Optional, Sequence

from ..config import DEFAULT_BLOCKED_TAG_TERMS
from .filters import is_valid_artwork
from .met_service import MetCollectionClient, UpstreamError, UpstreamNotFound
from .schemas import ArtworkRecord, PageResult


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_BATCH_SIZE = 20
DEFAULT_LIMIT = 30


class ArtworkFetcher:
    """Builds pages of valid artworks from Met search results.

    Parameters
    ----------
    client : MetCollectionClient
        Upstream API client.
    excluded_ids : AbstractSet[int]
        Object IDs that must never be returned.
    blocked_terms : AbstractSet[str]
        Tag terms that disqualify an artwork.
    batch_size : int
        Number of object records requested concurrently per window.
    """

    def __init__(
        self,
        client: MetCollectionClient,
        excluded_ids: AbstractSet[int],
        blocked_terms: AbstractSet[str] = DEFAULT_BLOCKED_TAG_TERMS,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.excluded_ids = frozenset(excluded_ids)
        self.blocked_terms = frozenset(blocked_terms)
        self.batch_size = batch_size

    def is_valid(self, record: ArtworkRecord) -> bool:
        return is_valid_artwork(record, self.excluded_ids, self.blocked_terms)

    async def _fetch_one(self, object_id: int) -> Optional[ArtworkRecord]:
        try:
            return await self.client.get_object(object_id)
        except UpstreamNotFound:
            return None
        except UpstreamError as exc:
            logger.error("Error fetching object %s: %s", object_id, exc)
            return None

    async def fetch_batch(self, ids: Sequence[int]) -> List[ArtworkRecord]:
        """Fetch one window of objects and return the valid ones sorted by ID.

        Every request is awaited before filtering; a failed request only
        drops its own object.
        """
        results = await asyncio.gather(
            *(self._fetch_one(object_id) for object_id in ids),
            return_exceptions=True,
        )
        survivors: List[ArtworkRecord] = []
        for object_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error("Unexpected error fetching object %s: %r", object_id, result)
                continue
            if result is not None and self.is_valid(result):
                survivors.append(result)
        survivors.sort(key=lambda record: record.get("objectID"))
        return survivors

    async def get_page(
        self,
        query: Optional[str] = None,
        department_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
    ) -> PageResult:
        """Return page ``page`` of ``limit`` valid artworks for a search."""
        object_ids = await self.client.search_object_ids(query, department_id)
        total = len(object_ids)
        if total == 0:
            return PageResult(page=page, total=0, artworks=[])

        start_index = (page - 1) * limit
        artworks: List[ArtworkRecord] = []
        i = start_index
        while len(artworks) < limit and i < total:
            window = object_ids[i:i + self.batch_size]
            artworks.extend(await self.fetch_batch(window))
            i += self.batch_size

        logger.info(
            "page %s: scanned ids %s-%s of %s, kept %s",
            page, start_index, min(i, total), total, len(artworks),
        )
        return PageResult(page=page, total=total, artworks=artworks[:limit])
