"""
List-view fallback: a failed store read yields an empty list plus a warning
instead of an error page.
"""
from typing import Any, Awaitable, Dict, Optional, Tuple, TypeVar

from app.core.exceptions import RecordStoreError
from app.core.logging_config import logger

T = TypeVar('T')


async def load_or_empty(awaitable: Awaitable[T], empty: T, context: str) -> Tuple[T, Optional[str]]:
    """Await a store read; on RecordStoreError log it and return (empty, warning message)"""
    try:
        return await awaitable, None
    except RecordStoreError as e:
        logger.log_error_with_context(e, context=context)
        return empty, e.message


def with_warning(payload: Dict[str, Any], warning: Optional[str]) -> Dict[str, Any]:
    if warning:
        payload["warning"] = warning
    return payload
