"""Caller-owned caching of loaded OpenAPI specifications."""

from specreq.cache.cache import SpecCache

__all__ = ["SpecCache"]
