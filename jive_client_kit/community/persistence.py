"""
Persistence contract used by the community registry, plus an in-memory store.

Records are plain dicts. ``find`` takes a partial-field filter: every key must
equal the record's value, dotted keys reach into nested dicts
(``{"oauth.access_token": "..."}``).
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Dict, List, Protocol, runtime_checkable

logger = logging.getLogger("community.persistence")

_MISSING = object()


@runtime_checkable
class Persistence(Protocol):
    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def find(self, collection: str, filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        ...

    async def remove(self, collection: str, key: str) -> bool:
        ...


def lookup_field(record: Dict[str, Any], dotted_key: str) -> Any:
    value: Any = record
    for part in dotted_key.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def matches_filter(record: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    return all(lookup_field(record, k) == v for k, v in (filter or {}).items())


class MemoryPersistence:
    """Dict-backed store, good for tests and single-process hosts."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            self._collections.setdefault(collection, {})[key] = copy.deepcopy(record)
        logger.debug("saved %s/%s", collection, key)
        return copy.deepcopy(record)

    async def find(self, collection: str, filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        async with self._lock:
            records = list(self._collections.get(collection, {}).values())
        return [copy.deepcopy(r) for r in records if matches_filter(r, filter)]

    async def remove(self, collection: str, key: str) -> bool:
        async with self._lock:
            removed = self._collections.get(collection, {}).pop(key, None)
        logger.debug("remove %s/%s found=%s", collection, key, removed is not None)
        return removed is not None
