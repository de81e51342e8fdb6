"""
Сервис для работы с объектным хранилищем файлов.

Поддерживает локальное хранилище и Amazon S3 (или совместимые сервисы).
Используется для логотипов каталогов и изображений товаров.
"""

import logging
import shutil
import time
from abc import ABC, abstractmethod
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.errors import UpstreamFailure, ValidationFailure

logger = logging.getLogger(__name__)

MAX_LOGO_SIZE = 2 * 1024 * 1024  # 2MB
MAX_PRODUCT_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    def get_file_url(self, file_path: str) -> Optional[str]:
        pass


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов.
    """

    def __init__(self, base_path: Optional[str] = None, base_url: Optional[str] = None):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.base_url = settings.CDN_BASE_URL if base_url is None else base_url

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        try:
            full_path = self.base_path / file_path
            full_path.parent.mkdir(parents=True, exist_ok=True)

            with open(full_path, "wb") as f:
                shutil.copyfileobj(file_data, f)

            logger.info(f"LOCAL STORAGE: File saved to {full_path}")
            return True
        except OSError as e:
            logger.error(f"LOCAL STORAGE: Error saving file: {e}")
            return False

    def get_file_url(self, file_path: str) -> Optional[str]:
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{file_path.lstrip('/')}"
        return f"/static/{file_path}"


class S3StorageProvider(StorageProvider):
    """
    Amazon S3 хранилище (или совместимые сервисы).
    """

    def __init__(
        self,
        bucket_name: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        s3_client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region or "us-east-1"

        if s3_client is None:
            config = Config(
                retries={"max_attempts": 3, "mode": "adaptive"},
                connect_timeout=10,
                read_timeout=30,
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            s3_client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=endpoint_url,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=config,
            )
        self.s3_client = s3_client

    def save_file(
        self, file_path: str, file_data: BinaryIO, content_type: Optional[str] = None
    ) -> bool:
        try:
            extra_args = {}
            if content_type:
                extra_args["ContentType"] = content_type

            # ContentLength указываем явно (важно для MinIO)
            file_data.seek(0)
            file_content = file_data.read()
            extra_args["ContentLength"] = len(file_content)

            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=BytesIO(file_content),
                **extra_args,
            )
            logger.info(f"S3 STORAGE: Uploaded {file_path} to bucket {self.bucket_name}")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 STORAGE: Error saving file to S3: {e}")
            return False

    def get_file_url(self, file_path: str) -> Optional[str]:
        if settings.CDN_BASE_URL:
            return f"{settings.CDN_BASE_URL.rstrip('/')}/{file_path.lstrip('/')}"
        endpoint = self.s3_client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{file_path}"


class AssetStorage:
    """
    Загрузка файлов каталогов в объектное хранилище.

    Пути:
        catalogs/{catalog_id}/logo/{timestamp}_{filename}
        catalogs/{catalog_id}/products/{product_id}/{timestamp}_{filename}
    """

    def __init__(self, provider: StorageProvider):
        self.provider = provider

    @staticmethod
    def _check(content_type: Optional[str], size: int, limit: int, label: str) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise ValidationFailure("The file must be an image")
        if size > limit:
            raise ValidationFailure(f"The {label} must not exceed {limit // (1024 * 1024)}MB")

    def _save(self, path: str, data: bytes, content_type: Optional[str]) -> str:
        if not self.provider.save_file(path, BytesIO(data), content_type):
            raise UpstreamFailure(detail=f"Failed to save {path} to storage")
        return self.provider.get_file_url(path)

    def upload_catalog_logo(
        self, catalog_id: str, filename: str, data: bytes, content_type: Optional[str]
    ) -> str:
        """Сохранить логотип каталога и вернуть его URL."""
        self._check(content_type, len(data), MAX_LOGO_SIZE, "logo")
        path = f"catalogs/{catalog_id}/logo/{int(time.time() * 1000)}_{Path(filename).name}"
        return self._save(path, data, content_type)

    def upload_product_image(
        self,
        catalog_id: str,
        product_id: str,
        filename: str,
        data: bytes,
        content_type: Optional[str],
    ) -> str:
        """Сохранить изображение товара и вернуть его URL."""
        self._check(content_type, len(data), MAX_PRODUCT_IMAGE_SIZE, "image")
        path = (
            f"catalogs/{catalog_id}/products/{product_id}/"
            f"{int(time.time() * 1000)}_{Path(filename).name}"
        )
        return self._save(path, data, content_type)


@lru_cache()
def get_asset_storage() -> AssetStorage:
    """Создать хранилище файлов согласно STORAGE_TYPE."""
    if settings.STORAGE_TYPE == "s3":
        provider: StorageProvider = S3StorageProvider(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
    else:
        provider = LocalStorageProvider()
    logger.info(f"Storage provider: {type(provider).__name__}")
    return AssetStorage(provider)
