"""
Serves files written by the local file storage backend.

S3 and MinIO hand out their own public URLs, so this route only answers in
local mode.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.core.exceptions import RecordNotFoundError
from app.gateway.storage import LocalFileStorage, get_file_storage, guess_content_type

router = APIRouter()


@router.get("/{bucket}/{path:path}")
async def get_stored_file(bucket: str, path: str):
    storage = get_file_storage()
    if not isinstance(storage, LocalFileStorage):
        raise RecordNotFoundError("file", f"{bucket}/{path}")

    target = storage.resolve(bucket, path)
    if not target.is_file():
        raise RecordNotFoundError("file", f"{bucket}/{path}")

    return FileResponse(target, media_type=guess_content_type(path), filename=target.name)
