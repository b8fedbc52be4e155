from typing import Any, Dict, List, Optional


class DocumentStore:
    """Keyed collection of flat documents.

    Registries only talk to this interface, so the same logic runs against
    an in-memory dict, a SQL table or a Firestore collection.
    """

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, key: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Remove ``key``; returns False when nothing was stored under it."""
        raise NotImplementedError

    def query(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """Return every document whose ``field`` equals ``value``."""
        raise NotImplementedError
