"""
媒体存储（文章缩略图）

S3MediaStorage 使用 boto3，同步调用放到线程池中执行。
"""
import logging
import os
import uuid
from typing import Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings

logger = logging.getLogger(__name__)


class MediaStorageError(Exception):
    """媒体存储操作失败"""


def derive_media_key(url: str, folder: str) -> Optional[str]:
    """
    从文件URL推导存储key：folder/文件名（去掉查询串）

    >>> derive_media_key("https://cdn.example.com/articles/abc.png?v=1", "articles")
    'articles/abc.png'
    """
    if not url:
        return None
    filename = url.split("?", 1)[0].rstrip("/").split("/")[-1]
    if not filename:
        return None
    return f"{folder}/{filename}"


class MediaStorage:
    """媒体存储接口"""

    async def upload(self, file: UploadFile) -> str:
        """上传文件，返回可公开访问的URL"""
        raise NotImplementedError

    async def delete(self, url: str) -> None:
        """按URL删除文件"""
        raise NotImplementedError


class S3MediaStorage(MediaStorage):
    """S3兼容对象存储"""

    def __init__(
        self,
        bucket_name: str,
        region_name: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        folder: str = "articles",
    ):
        self.bucket_name = bucket_name
        self.folder = folder
        self.public_base_url = (
            public_base_url or f"https://{bucket_name}.s3.{region_name or 'us-east-1'}.amazonaws.com"
        ).rstrip("/")
        boto_config = BotoConfig(
            region_name=region_name,
            signature_version='s3v4',
            retries={
                'max_attempts': 3,
                'mode': 'standard'
            }
        )
        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            config=boto_config
        )

    async def upload(self, file: UploadFile) -> str:
        extension = os.path.splitext(file.filename or "")[1].lower()
        key = f"{self.folder}/{uuid.uuid4().hex}{extension}"
        extra_args = {"ContentType": file.content_type} if file.content_type else None

        try:
            await run_in_threadpool(
                self.s3_client.upload_fileobj,
                file.file,
                self.bucket_name,
                key,
                ExtraArgs=extra_args,
            )
        except (BotoCoreError, ClientError) as e:
            raise MediaStorageError(f"上传文件失败: {e}") from e

        logger.info("缩略图已上传: %s", key)
        return f"{self.public_base_url}/{key}"

    async def delete(self, url: str) -> None:
        key = derive_media_key(url, self.folder)
        if not key:
            return
        try:
            await run_in_threadpool(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=key,
            )
        except (BotoCoreError, ClientError) as e:
            raise MediaStorageError(f"删除文件失败: {e}") from e

        logger.info("缩略图已删除: %s", key)


_media_storage: Optional[MediaStorage] = None


def get_media_storage() -> Optional[MediaStorage]:
    """
    媒体存储依赖，未配置桶时返回 None
    """
    global _media_storage
    if _media_storage is None and settings.media_storage_enabled:
        _media_storage = S3MediaStorage(
            bucket_name=settings.S3_BUCKET_NAME,
            region_name=settings.S3_REGION_NAME,
            access_key_id=settings.S3_ACCESS_KEY_ID,
            secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            endpoint_url=settings.S3_ENDPOINT_URL,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            folder=settings.MEDIA_FOLDER,
        )
    return _media_storage
