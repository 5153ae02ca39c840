"""
Collection package for the Met museum proxy.

This package wraps the Metropolitan Museum of Art public collection
API. Departments and searches are relayed as-is, while the artworks
endpoint turns raw search results into pages of displayable records:
objects without an image, objects withheld by curators and objects
carrying blocked subject tags are filtered out before a page is
returned to the browser.
"""

from .router import router as collection_router  # noqa: F401
