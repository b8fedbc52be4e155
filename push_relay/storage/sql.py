from typing import Any, Dict, List, Optional

from sqlalchemy import select

from .base import DocumentStore


class SqlStore(DocumentStore):
    """Stores documents as rows of a declarative ``model``.

    Document keys map one-to-one onto the model's column names and the
    document key is the model's primary key.
    """

    def __init__(self, session_factory, model):
        self.session_factory = session_factory
        self.model = model
        self._columns = [column.name for column in model.__table__.columns]

    def _to_doc(self, row) -> Dict[str, Any]:
        return {name: getattr(row, name) for name in self._columns}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self.session_factory() as db:
            row = db.get(self.model, key)
            return self._to_doc(row) if row is not None else None

    def set(self, key: str, data: Dict[str, Any]) -> None:
        values = {name: value for name, value in data.items() if name in self._columns}
        with self.session_factory() as db:
            db.merge(self.model(**values))
            db.commit()

    def delete(self, key: str) -> bool:
        with self.session_factory() as db:
            row = db.get(self.model, key)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def query(self, field: str, value: Any) -> List[Dict[str, Any]]:
        column = getattr(self.model, field)
        with self.session_factory() as db:
            rows = db.execute(select(self.model).where(column == value)).scalars().all()
            return [self._to_doc(row) for row in rows]
