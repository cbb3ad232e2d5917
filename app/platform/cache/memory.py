import copy
from typing import Any, Dict, List

from app.platform.cache.base import CacheStore


class MemoryCacheStore(CacheStore):
    """Process-local store. Entries are deep-copied in and out."""

    def __init__(self):
        self._data: Dict[str, List[Dict[str, Any]]] = {}

    async def load(self, key: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._data.get(key, []))

    async def save(self, key: str, entries: List[Dict[str, Any]]) -> None:
        self._data[key] = copy.deepcopy(entries)

    async def clear(self, key: str) -> None:
        self._data.pop(key, None)
