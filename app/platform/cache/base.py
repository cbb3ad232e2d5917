from abc import ABC, abstractmethod
from typing import Any, Dict, List


class CacheStore(ABC):
    """
    Key/value backend that holds one JSON-serializable list per key.
    The list is always read and written as a whole.
    """

    @abstractmethod
    async def load(self, key: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def save(self, key: str, entries: List[Dict[str, Any]]) -> None:
        ...

    @abstractmethod
    async def clear(self, key: str) -> None:
        ...
