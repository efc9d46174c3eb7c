"""
Per-record processing flag.

While a review decision on a record is in flight, a second decision on the
same record is refused instead of queued. This is advisory and in-process
only; it does not coordinate separate server processes.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Set

from app.core.exceptions import OperationInProgressError


class ProcessingGuard:
    """Set of record ids with an action in flight"""

    def __init__(self):
        self._in_flight: Set[str] = set()

    def is_processing(self, record_id: str) -> bool:
        return record_id in self._in_flight

    @asynccontextmanager
    async def hold(self, record_id: str) -> AsyncIterator[None]:
        # Check and claim happen without an await in between
        if record_id in self._in_flight:
            raise OperationInProgressError(record_id)
        self._in_flight.add(record_id)
        try:
            yield
        finally:
            self._in_flight.discard(record_id)


processing_guard = ProcessingGuard()
