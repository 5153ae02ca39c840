"""Met collection proxy: paginated, filtered access to the Met public API."""

__version__ = "1.0.0"
