"""
Record store interface shared by the SQL and in-memory implementations.

Filters map a field to a value. A list, tuple or set value means "field in
values" and ``None`` means "field is null". Order is a sequence of
``(field, descending)`` pairs applied left to right.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from app.core.exceptions import ValidationError
from app.models import MODEL_FOR_ENTITY
from app.models.enums import Entity

Filters = Mapping[str, Any]
Order = Sequence[Tuple[str, bool]]

MULTI_VALUE_TYPES = (list, tuple, set, frozenset)


def entity_fields(entity: Entity) -> Set[str]:
    """Column names of the table behind an entity"""
    return set(MODEL_FOR_ENTITY[entity].__table__.columns.keys())


def check_fields(entity: Entity, names: Iterable[str]) -> None:
    """Raise ValidationError for any field the entity does not have"""
    known = entity_fields(entity)
    unknown = sorted(set(names) - known)
    if unknown:
        raise ValidationError(
            f"Unknown field(s) for {entity.value}: {', '.join(unknown)}",
            field=unknown[0]
        )


class RecordStore(ABC):
    """
    Async access to the record tables.

    Every call is a single attempt. Backend failures surface as
    RecordStoreError with nothing applied.
    """

    @abstractmethod
    async def fetch_collection(
        self,
        entity: Entity,
        filters: Optional[Filters] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch records matching all filters, ordered, optionally bounded"""

    @abstractmethod
    async def fetch_one(self, entity: Entity, record_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a record by id, None when it does not exist"""

    @abstractmethod
    async def count(self, entity: Entity, filters: Optional[Filters] = None) -> int:
        """Count records matching all filters"""

    @abstractmethod
    async def insert(self, entity: Entity, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it with its id and column defaults"""

    @abstractmethod
    async def update(self, entity: Entity, record_id: str, fields: Dict[str, Any]) -> None:
        """Set fields on one record"""

    @abstractmethod
    async def update_many(self, entity: Entity, ids: Sequence[str], fields: Dict[str, Any]) -> None:
        """Set the same fields on every listed record in one call"""

    @abstractmethod
    async def delete(self, entity: Entity, record_id: str) -> None:
        """Delete one record"""

    @abstractmethod
    async def upload_file(self, bucket: str, path: str, content: bytes) -> str:
        """Store a file and return its public URL"""
