"""
Content filtering for artwork records.

An artwork is shown only when it has an integer ``objectID`` and a
primary image, is not on the curators' exclusion list and carries none
of the blocked subject tags.
"""

from __future__ import annotations

from typing import AbstractSet, Any, Mapping

from ..config import DEFAULT_BLOCKED_TAG_TERMS


def has_object_id(record: Mapping[str, Any]) -> bool:
    object_id = record.get("objectID")
    return isinstance(object_id, int) and not isinstance(object_id, bool)


def has_blocked_tag(record: Mapping[str, Any], blocked_terms: AbstractSet[str]) -> bool:
    """Return True when any tag ``term`` of the record is blocked.

    ``tags`` may be missing or ``null`` on Met records; both mean no tags.
    """
    tags = record.get("tags") or []
    if not isinstance(tags, list):
        return False
    for tag in tags:
        if not isinstance(tag, Mapping):
            continue
        term = tag.get("term")
        if isinstance(term, str) and term in blocked_terms:
            return True
    return False


def is_valid_artwork(
    record: Mapping[str, Any],
    excluded_ids: AbstractSet[int],
    blocked_terms: AbstractSet[str] = DEFAULT_BLOCKED_TAG_TERMS,
) -> bool:
    if not has_object_id(record):
        return False
    if not record.get("primaryImage"):
        return False
    if record["objectID"] in excluded_ids:
        return False
    if has_blocked_tag(record, blocked_terms):
        return False
    return True
