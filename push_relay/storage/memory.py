from typing import Any, Dict, List, Optional

from .base import DocumentStore


class MemoryStore(DocumentStore):
    """Plain dict storage. No locking: concurrent writers race, last write wins."""

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        doc = self._docs.get(key)
        return dict(doc) if doc is not None else None

    def set(self, key: str, data: Dict[str, Any]) -> None:
        self._docs[key] = dict(data)

    def delete(self, key: str) -> bool:
        return self._docs.pop(key, None) is not None

    def query(self, field: str, value: Any) -> List[Dict[str, Any]]:
        return [dict(doc) for doc in self._docs.values() if doc.get(field) == value]

    def __len__(self):
        return len(self._docs)
