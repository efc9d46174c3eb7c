"""
SQL Record Store - SQLAlchemy async session over the record tables.
Each write commits on its own; a failed call rolls back and raises RecordStoreError.
"""

import time
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import RecordStoreError
from app.core.logging_config import logger
from app.gateway.base import RecordStore, Filters, Order, MULTI_VALUE_TYPES, check_fields
from app.gateway.storage import FileStorage, get_file_storage
from app.models import MODEL_FOR_ENTITY
from app.models.enums import Entity


def _to_dict(instance) -> Dict[str, Any]:
    return {column.key: getattr(instance, column.key) for column in instance.__table__.columns}


class SQLRecordStore(RecordStore):
    """Record store bound to one request's database session"""

    def __init__(self, session: AsyncSession, file_storage: Optional[FileStorage] = None):
        self.session = session
        self.file_storage = file_storage or get_file_storage()

    # ==================== Query helpers ====================

    def _apply_filters(self, stmt, model, entity: Entity, filters: Optional[Filters]):
        if not filters:
            return stmt
        check_fields(entity, filters.keys())
        for name, value in filters.items():
            column = getattr(model, name)
            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, MULTI_VALUE_TYPES):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    async def _failure(self, operation: str, entity: Entity, error: Exception) -> RecordStoreError:
        await self.session.rollback()
        logger.log_error_with_context(error, context=f"store.{operation}", store_entity=entity.value)
        return RecordStoreError(operation, entity.value, str(error))

    # ==================== Reads ====================

    async def fetch_collection(
        self,
        entity: Entity,
        filters: Optional[Filters] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        model = MODEL_FOR_ENTITY[entity]
        stmt = self._apply_filters(select(model), model, entity, filters)

        if order:
            check_fields(entity, [name for name, _ in order])
            for name, descending in order:
                column = getattr(model, name)
                stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        start = time.perf_counter()
        try:
            result = await self.session.execute(stmt)
            rows = [_to_dict(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise await self._failure("fetch", entity, e) from e

        logger.log_store_call("fetch", entity.value, (time.perf_counter() - start) * 1000, rows=len(rows))
        return rows

    async def fetch_one(self, entity: Entity, record_id: str) -> Optional[Dict[str, Any]]:
        model = MODEL_FOR_ENTITY[entity]
        try:
            result = await self.session.execute(select(model).where(model.id == record_id))
            instance = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise await self._failure("fetch", entity, e) from e
        return _to_dict(instance) if instance is not None else None

    async def count(self, entity: Entity, filters: Optional[Filters] = None) -> int:
        model = MODEL_FOR_ENTITY[entity]
        stmt = self._apply_filters(select(func.count()).select_from(model), model, entity, filters)
        try:
            result = await self.session.execute(stmt)
            return result.scalar() or 0
        except SQLAlchemyError as e:
            raise await self._failure("count", entity, e) from e

    # ==================== Writes ====================

    async def insert(self, entity: Entity, fields: Dict[str, Any]) -> Dict[str, Any]:
        check_fields(entity, fields.keys())
        model = MODEL_FOR_ENTITY[entity]
        instance = model(**fields)

        start = time.perf_counter()
        try:
            self.session.add(instance)
            await self.session.commit()
            await self.session.refresh(instance)
        except SQLAlchemyError as e:
            raise await self._failure("insert", entity, e) from e

        logger.log_store_call("insert", entity.value, (time.perf_counter() - start) * 1000, rows=1)
        return _to_dict(instance)

    async def update(self, entity: Entity, record_id: str, fields: Dict[str, Any]) -> None:
        await self.update_many(entity, [record_id], fields)

    async def update_many(self, entity: Entity, ids: Sequence[str], fields: Dict[str, Any]) -> None:
        check_fields(entity, fields.keys())
        if not ids or not fields:
            return
        model = MODEL_FOR_ENTITY[entity]

        start = time.perf_counter()
        try:
            result = await self.session.execute(
                update(model)
                .where(model.id.in_(list(ids)))
                .values(**fields)
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._failure("update", entity, e) from e

        logger.log_store_call("update", entity.value, (time.perf_counter() - start) * 1000, rows=result.rowcount)

    async def delete(self, entity: Entity, record_id: str) -> None:
        model = MODEL_FOR_ENTITY[entity]
        try:
            await self.session.execute(delete(model).where(model.id == record_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._failure("delete", entity, e) from e

        logger.log_store_call("delete", entity.value, 0.0, rows=1)

    async def upload_file(self, bucket: str, path: str, content: bytes) -> str:
        return await self.file_storage.save(bucket, path, content)
