"""
In-memory record store.

Serves the demo fixtures when mock mode is on and backs the unit tests.
Records are copied on the way in and out so callers never share state
with the store.
"""

from copy import deepcopy
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from app.core.exceptions import RecordStoreError
from app.core.logging_config import logger
from app.core.types import generate_uuid
from app.gateway.base import RecordStore, Filters, Order, MULTI_VALUE_TYPES, check_fields
from app.models import MODEL_FOR_ENTITY
from app.models.enums import Entity


def _column_defaults(entity: Entity) -> Dict[str, Any]:
    """Column defaults of the entity's table, evaluated now"""
    values = {}
    for column in MODEL_FOR_ENTITY[entity].__table__.columns:
        default = column.default
        if default is None:
            values[column.key] = None
        elif default.is_scalar:
            values[column.key] = default.arg
        else:
            values[column.key] = default.arg(None)
    return values


def _matches(record: Dict[str, Any], filters: Optional[Filters]) -> bool:
    if not filters:
        return True
    for name, expected in filters.items():
        actual = record.get(name)
        if expected is None:
            if actual is not None:
                return False
        elif isinstance(expected, MULTI_VALUE_TYPES):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(name: str):
    # Nulls sort lowest, as SQLite does
    def key(record: Dict[str, Any]):
        value = record.get(name)
        return (value is not None, value if value is not None else 0)
    return key


class InMemoryRecordStore(RecordStore):
    """Dict-of-lists record store"""

    def __init__(self, seed: Optional[Dict[Entity, List[Dict[str, Any]]]] = None):
        self._tables: Dict[Entity, List[Dict[str, Any]]] = {entity: [] for entity in Entity}
        self.files: Dict[str, bytes] = {}
        for entity, records in (seed or {}).items():
            for record in records:
                self._tables[Entity(entity)].append({**_column_defaults(Entity(entity)), **deepcopy(record)})

    def _find(self, entity: Entity, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self._tables[entity]:
            if record["id"] == record_id:
                return record
        return None

    # ==================== Reads ====================

    async def fetch_collection(
        self,
        entity: Entity,
        filters: Optional[Filters] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        if filters:
            check_fields(entity, filters.keys())
        rows = [record for record in self._tables[entity] if _matches(record, filters)]

        if order:
            check_fields(entity, [name for name, _ in order])
            # Stable sorts applied from the last key to the first
            for name, descending in reversed(list(order)):
                try:
                    rows.sort(key=_sort_key(name), reverse=descending)
                except TypeError as e:
                    raise RecordStoreError("fetch", entity.value, f"cannot order by {name}: {e}")

        if limit is not None:
            rows = rows[:limit]

        logger.log_store_call("fetch", entity.value, 0.0, rows=len(rows), store_backend="memory")
        return deepcopy(rows)

    async def fetch_one(self, entity: Entity, record_id: str) -> Optional[Dict[str, Any]]:
        record = self._find(entity, record_id)
        return deepcopy(record) if record is not None else None

    async def count(self, entity: Entity, filters: Optional[Filters] = None) -> int:
        if filters:
            check_fields(entity, filters.keys())
        return sum(1 for record in self._tables[entity] if _matches(record, filters))

    # ==================== Writes ====================

    async def insert(self, entity: Entity, fields: Dict[str, Any]) -> Dict[str, Any]:
        check_fields(entity, fields.keys())
        record = {**_column_defaults(entity), **deepcopy(fields)}
        record["id"] = record.get("id") or generate_uuid()
        self._tables[entity].append(record)

        logger.log_store_call("insert", entity.value, 0.0, rows=1, store_backend="memory")
        return deepcopy(record)

    async def update(self, entity: Entity, record_id: str, fields: Dict[str, Any]) -> None:
        await self.update_many(entity, [record_id], fields)

    async def update_many(self, entity: Entity, ids: Sequence[str], fields: Dict[str, Any]) -> None:
        check_fields(entity, fields.keys())
        targets = set(ids)
        changes = deepcopy(fields)
        if "updated_at" in _column_defaults(entity) and "updated_at" not in changes and targets:
            changes["updated_at"] = datetime.utcnow()

        rows = 0
        for record in self._tables[entity]:
            if record["id"] in targets:
                record.update(changes)
                rows += 1

        logger.log_store_call("update", entity.value, 0.0, rows=rows, store_backend="memory")

    async def delete(self, entity: Entity, record_id: str) -> None:
        self._tables[entity] = [record for record in self._tables[entity] if record["id"] != record_id]
        logger.log_store_call("delete", entity.value, 0.0, rows=1, store_backend="memory")

    async def upload_file(self, bucket: str, path: str, content: bytes) -> str:
        self.files[f"{bucket}/{path}"] = content
        return f"memory://{bucket}/{path}"


_memory_store: Optional[InMemoryRecordStore] = None


def get_memory_store() -> InMemoryRecordStore:
    """Process-wide store seeded with the demo fixtures"""
    global _memory_store
    if _memory_store is None:
        from app.db.fixtures import build_fixtures

        _memory_store = InMemoryRecordStore(build_fixtures())
        logger.info("Mock mode: serving demo fixtures from memory")
    return _memory_store
