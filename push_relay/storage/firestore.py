from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from .base import DocumentStore


class FirestoreStore(DocumentStore):
    """Firestore collection storage, one document per key."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def for_app(cls, firebase_app, name: str) -> "FirestoreStore":
        from firebase_admin import firestore

        return cls(firestore.client(firebase_app).collection(name))

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        snapshot = self.collection.document(key).get()
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def set(self, key: str, data: Dict[str, Any]) -> None:
        self.collection.document(key).set(dict(data))

    def delete(self, key: str) -> bool:
        ref = self.collection.document(key)
        if not ref.get().exists:
            return False
        ref.delete()
        return True

    def query(self, field: str, value: Any) -> List[Dict[str, Any]]:
        docs = self.collection.where(filter=FieldFilter(field, "==", value)).stream()
        return [doc.to_dict() for doc in docs]
