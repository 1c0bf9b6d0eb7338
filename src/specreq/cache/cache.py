"""Caller-owned, in-memory caching of loaded specifications.

:func:`~specreq.parser.loader.load` never caches. Callers that load the
same file repeatedly can hold a :class:`SpecCache` instead; entries are keyed
by the resolved absolute path and are reused only while the file's
modification time and size are unchanged.

There is no module-level cache instance, and :class:`SpecCache` takes no
locks: share one between threads only behind your own synchronisation.

See Also:
    :class:`~specreq.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``max_entries``.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Optional, Union

from specreq.exceptions import SpecIOError
from specreq.models import CacheConfig, LoadOptions, Specification
from specreq.parser.loader import load

logger = logging.getLogger(__name__)

_Fingerprint = tuple[int, int]


class SpecCache:
    """In-memory cache of :class:`~specreq.models.Specification` objects.

    Args:
        config: Cache configuration (``enabled`` flag and ``max_entries``).
        options: Loader settings used on every cache miss.

    Example::

        from specreq.cache import SpecCache

        cache = SpecCache()
        spec = cache.load("openapi.yaml")        # reads the file
        same = cache.load("openapi.yaml")        # served from memory
        assert spec is same
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        options: Optional[LoadOptions] = None,
    ) -> None:
        self._config = config or CacheConfig()
        self._options = options
        self._entries: OrderedDict[Path, tuple[_Fingerprint, Specification]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def load(self, path: Union[str, Path]) -> Specification:
        """Return the spec at *path*, reading the file only when it changed.

        Raises:
            SpecIOError: If the file cannot be stat'ed or read.
            SpecParseError: If the content is not valid JSON or YAML.
            SchemaViolationError: If the document breaks an OpenAPI rule.
        """
        if not self._config.enabled:
            return load(path, self._options)

        key = Path(path).resolve()
        fingerprint = self._fingerprint(key, path)

        entry = self._entries.get(key)
        if entry is not None and entry[0] == fingerprint:
            self._hits += 1
            logger.debug("Spec cache hit: %s", key)
            return entry[1]

        self._misses += 1
        logger.debug("Spec cache miss: %s", key)
        spec = load(key, self._options)
        self._entries.pop(key, None)
        self._entries[key] = (fingerprint, spec)
        while len(self._entries) > max(self._config.max_entries, 0):
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted %s from spec cache", evicted)
        return spec

    def invalidate(self, path: Union[str, Path]) -> None:
        """Drop the entry for *path*, if any."""
        self._entries.pop(Path(path).resolve(), None)

    def clear(self) -> None:
        """Remove all entries and reset the hit/miss counters."""
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled: ``size``,
            ``max_entries``, ``hits`` and ``misses``.
        """
        if not self._config.enabled:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._entries),
            "max_entries": self._config.max_entries,
            "hits": self._hits,
            "misses": self._misses,
        }

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _fingerprint(key: Path, original: Union[str, Path]) -> _Fingerprint:
        try:
            stat = key.stat()
        except OSError as exc:
            raise SpecIOError(f"Spec file not found: {original}", path=str(original)) from exc
        return stat.st_mtime_ns, stat.st_size
