"""
File Storage - certificate and activity uploads

- local: files under UPLOAD_DIR, served back by the /storage route
- s3 / minio: boto3 client, public object URL
"""

import asyncio
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.exceptions import RecordStoreError, ValidationError
from app.core.logging_config import logger


def normalize_object_path(path: str) -> str:
    """Forward slashes, no leading slash, no parent references"""
    normalized = path.replace("\\", "/").lstrip("/")
    if not normalized or any(part in ("", ".", "..") for part in normalized.split("/")):
        raise ValidationError(f"Invalid storage path: {path}", field="path")
    return normalized


def guess_content_type(path: str) -> str:
    content_type, _ = mimetypes.guess_type(path)
    return content_type or "application/octet-stream"


class FileStorage(ABC):
    """Bucket/path addressed blob storage"""

    @abstractmethod
    async def save(self, bucket: str, path: str, content: bytes) -> str:
        """Store content and return its public URL"""

    def public_url(self, bucket: str, path: str) -> str:
        return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/api/{settings.API_VERSION}/storage/{bucket}/{path}"


class LocalFileStorage(FileStorage):
    """Stores uploads on local disk under UPLOAD_DIR/{bucket}/{path}"""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIR).resolve()

    def resolve(self, bucket: str, path: str) -> Path:
        """Absolute path of a stored object, confined to the upload root"""
        target = (self.root / normalize_object_path(bucket) / normalize_object_path(path)).resolve()
        if self.root not in target.parents:
            raise ValidationError(f"Invalid storage path: {bucket}/{path}", field="path")
        return target

    async def save(self, bucket: str, path: str, content: bytes) -> str:
        target = self.resolve(bucket, path)
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"[Storage] Failed to write {bucket}/{path}: {e}")
            raise RecordStoreError("upload", bucket, str(e))

        logger.info(f"[Storage] Saved {bucket}/{path} ({len(content)} bytes)")
        return self.public_url(bucket, normalize_object_path(path))


class S3FileStorage(FileStorage):
    """
    S3 or MinIO object storage. One bucket per storage bucket name;
    the client is created on first use.
    """

    def __init__(self, use_minio: bool = False):
        self.use_minio = use_minio
        self._client = None

    def _get_client(self):
        """Lazy initialization of S3/MinIO client"""
        if self._client is None:
            if self.use_minio:
                self._client = boto3.client(
                    's3',
                    endpoint_url=f"http://{settings.MINIO_ENDPOINT}",
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    config=Config(
                        signature_version='s3v4',
                        s3={'addressing_style': 'path'}
                    ),
                    region_name=settings.AWS_REGION
                )
            elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                self._client = boto3.client(
                    's3',
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    region_name=settings.AWS_REGION
                )
            else:
                # IAM role credentials (ECS/EC2)
                self._client = boto3.client('s3', region_name=settings.AWS_REGION)
                logger.info("S3 client using IAM role credentials")
        return self._client

    def public_url(self, bucket: str, path: str) -> str:
        if settings.S3_PUBLIC_URL:
            return f"{settings.S3_PUBLIC_URL.rstrip('/')}/{bucket}/{path}"
        if self.use_minio:
            return f"http://{settings.MINIO_ENDPOINT}/{bucket}/{path}"
        return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{path}"

    async def save(self, bucket: str, path: str, content: bytes) -> str:
        key = normalize_object_path(path)
        client = self._get_client()
        try:
            await asyncio.to_thread(
                client.put_object,
                Bucket=bucket,
                Key=key,
                Body=content,
                ContentType=guess_content_type(key),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"[S3-Upload] Failed: {bucket}/{key}: {e}")
            raise RecordStoreError("upload", bucket, str(e))

        logger.info(f"[S3-Upload] Uploaded: {bucket}/{key} ({len(content)} bytes)")
        return self.public_url(bucket, key)


_file_storage: Optional[FileStorage] = None


def get_file_storage() -> FileStorage:
    """File storage selected by STORAGE_MODE"""
    global _file_storage
    if _file_storage is None:
        mode = settings.STORAGE_MODE.lower()
        if mode == "s3":
            _file_storage = S3FileStorage()
        elif mode == "minio":
            _file_storage = S3FileStorage(use_minio=True)
        else:
            _file_storage = LocalFileStorage()
        logger.info(f"File storage mode: {mode}")
    return _file_storage
