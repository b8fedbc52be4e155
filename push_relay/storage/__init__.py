"""
Storage backends behind a small document-store interface
"""
from .base import DocumentStore
from .memory import MemoryStore
from .sql import SqlStore
from .firestore import FirestoreStore

__all__ = [
    "DocumentStore",
    "MemoryStore",
    "SqlStore",
    "FirestoreStore",
]
