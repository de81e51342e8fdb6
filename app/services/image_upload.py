"""
Загрузка изображений на внешний хостинг (Cloudinary).

Несколько файлов загружаются с ограничением параллелизма и паузой
между загрузками, чтобы не упираться в лимит запросов хостинга.
По умолчанию файлы отправляются строго по одному с паузой в секунду.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Optional, Sequence

import httpx

from app.core.config import settings
from app.services.image_service import ImageService, image_service

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


@dataclass
class ImageFile:
    """Файл изображения, полученный от клиента."""

    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class UploadResult:
    success: bool
    url: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BatchUploadResult:
    """Итог загрузки нескольких файлов (URL в порядке исходных файлов)."""

    urls: List[str] = field(default_factory=list)
    failures: List[dict] = field(default_factory=list)
    total: int = 0


class CloudinaryUploader:
    """
    Клиент unsigned-загрузки в Cloudinary.

    Ошибки сети и ответы с ошибкой не выбрасываются, а возвращаются
    в UploadResult, чтобы вызывающий код мог продолжить с остальными файлами.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        upload_preset: Optional[str] = None,
        folder: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name if cloud_name is not None else settings.CLOUDINARY_CLOUD_NAME
        self.upload_preset = (
            upload_preset if upload_preset is not None else settings.CLOUDINARY_UPLOAD_PRESET
        )
        self.folder = folder if folder is not None else settings.CLOUDINARY_FOLDER
        self.client = client
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.upload_preset)

    async def _post(self, image: ImageFile) -> httpx.Response:
        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)
        files = {"file": (image.filename, image.data, image.content_type or "application/octet-stream")}
        data = {"upload_preset": self.upload_preset, "folder": self.folder}

        if self.client is not None:
            return await self.client.post(url, files=files, data=data)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, files=files, data=data)

    async def upload(self, image: ImageFile) -> UploadResult:
        """Загрузить одно изображение и вернуть его публичный URL."""
        if not self.configured:
            logger.warning("Cloudinary is not configured")
            return UploadResult(
                success=False,
                error="Cloudinary is not configured. Check CLOUDINARY_CLOUD_NAME "
                "and CLOUDINARY_UPLOAD_PRESET.",
            )

        logger.info(f"Uploading {image.filename} ({len(image.data) / 1024:.2f} KB) to Cloudinary")
        try:
            response = await self._post(image)
        except httpx.HTTPError as e:
            logger.error(f"Error uploading {image.filename} to Cloudinary: {e}")
            return UploadResult(success=False, error=f"Connection error: {e}")

        if response.is_error:
            return UploadResult(
                success=False,
                error=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        try:
            payload = response.json()
        except ValueError:
            return UploadResult(success=False, error="Invalid response from Cloudinary")

        secure_url = payload.get("secure_url")
        if secure_url:
            logger.info(f"Image uploaded to Cloudinary: {secure_url}")
            return UploadResult(success=True, url=secure_url)

        message = (payload.get("error") or {}).get("message") or "Unknown Cloudinary error"
        logger.error(f"Cloudinary response without URL: {payload}")
        return UploadResult(success=False, error=message)


class BatchUploader:
    """
    Загрузка нескольких изображений с ограничением скорости.

    Args:
        uploader: Клиент хостинга изображений
        concurrency: Сколько файлов загружается одновременно
        delay: Пауза (сек) после каждой загрузки перед следующим файлом
        compress: Сжимать ли изображения перед отправкой
    """

    def __init__(
        self,
        uploader: CloudinaryUploader,
        concurrency: int = 1,
        delay: float = 1.0,
        compress: bool = True,
        images: ImageService = image_service,
    ):
        self.uploader = uploader
        self.concurrency = max(1, concurrency)
        self.delay = delay
        self.compress = compress
        self.images = images

    async def _compress(self, image: ImageFile) -> ImageFile:
        """
        Сжать файл в пуле потоков, не блокируя event loop.

        Перекодированный файл получает тип image/jpeg и расширение .jpg.
        """
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self.images.compress_image, image.data)
        if data is image.data:
            return image
        return ImageFile(
            filename=f"{PurePath(image.filename or 'image').stem}.jpg",
            content_type="image/jpeg",
            data=data,
        )

    async def upload_all(self, files: Sequence[ImageFile]) -> BatchUploadResult:
        """
        Загрузить файлы, сохраняя их исходный порядок в результате.

        Невалидные файлы пропускаются без обращения к хостингу.
        """
        results: List[Optional[UploadResult]] = [None] * len(files)
        queue: asyncio.Queue = asyncio.Queue()
        for index, image in enumerate(files):
            queue.put_nowait((index, image))

        async def worker() -> None:
            while True:
                try:
                    index, image = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                is_valid, error = self.images.validate_file(
                    image.filename, image.content_type, len(image.data)
                )
                if not is_valid:
                    logger.warning(f"File {image.filename} is invalid: {error}")
                    results[index] = UploadResult(success=False, error=error)
                    continue

                if self.compress:
                    image = await self._compress(image)
                results[index] = await self.uploader.upload(image)

                if self.delay and not queue.empty():
                    await asyncio.sleep(self.delay)

        workers = min(self.concurrency, len(files))
        await asyncio.gather(*(worker() for _ in range(workers)))

        batch = BatchUploadResult(total=len(files))
        for image, result in zip(files, results):
            if result is not None and result.success:
                batch.urls.append(result.url)
            else:
                batch.failures.append(
                    {"filename": image.filename, "error": result.error if result else None}
                )
        logger.info(f"{len(batch.urls)} of {batch.total} images uploaded")
        return batch
