"""
Сервис для работы с изображениями товаров.

Обеспечивает валидацию, сжатие перед загрузкой и контроль размера
изображений, встроенных в документ товара.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Tuple

from PIL import Image

from app.core.errors import ValidationFailure

logger = logging.getLogger(__name__)


class ImageService:
    """
    Сервис для работы с изображениями товаров.

    Обеспечивает:
    - Валидацию загружаемых файлов
    - Сжатие больших изображений перед отправкой на хостинг
    - Оценку размера base64-изображений внутри документа товара
    """

    # Поддерживаемые форматы
    SUPPORTED_FORMATS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
    SUPPORTED_MIME_TYPES = {
        "image/jpeg", "image/jpg", "image/png",
        "image/webp", "image/gif",
    }

    # Максимальный размер загружаемого файла
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    # Параметры сжатия
    COMPRESS_THRESHOLD = 1 * 1024 * 1024  # файлы меньше 1MB не сжимаются
    COMPRESS_TARGET_SIZE = 1 * 1024 * 1024
    COMPRESS_MAX_DIMENSION = 1920
    COMPRESS_QUALITIES = (85, 75, 65, 55, 45)

    # Лимит документа хранилища 1MB, оставляем запас
    MAX_DOCUMENT_IMAGES_SIZE = 900 * 1024

    def validate_file(
        self, filename: str, content_type: Optional[str], file_size: int
    ) -> Tuple[bool, Optional[str]]:
        """
        Валидация загружаемого файла.

        Args:
            filename: Имя файла
            content_type: MIME тип, заявленный клиентом
            file_size: Размер файла в байтах

        Returns:
            Tuple[bool, Optional[str]]: (валиден, сообщение об ошибке)
        """
        if content_type not in self.SUPPORTED_MIME_TYPES:
            return False, "Unsupported image format. Use JPG, PNG, GIF or WebP."

        file_ext = Path(filename or "").suffix.lower()
        if file_ext and file_ext not in self.SUPPORTED_FORMATS:
            return False, f"Unsupported file extension: {file_ext}"

        if file_size > self.MAX_FILE_SIZE:
            return False, "The image is too large. Maximum 10MB."

        return True, None

    def validate_image(self, filename: str, content_type: Optional[str], file_size: int) -> None:
        """То же, что validate_file, но с исключением ValidationFailure."""
        is_valid, error_message = self.validate_file(filename, content_type, file_size)
        if not is_valid:
            raise ValidationFailure(error_message)

    def compress_image(self, data: bytes) -> bytes:
        """
        Сжать изображение перед загрузкой.

        Файлы меньше порога возвращаются как есть. Большие изображения
        уменьшаются до 1920px по большей стороне и перекодируются в JPEG
        с понижением качества, пока не уложатся примерно в 1MB.
        Если Pillow не смог обработать файл, возвращается оригинал.
        """
        if len(data) < self.COMPRESS_THRESHOLD:
            return data

        try:
            with Image.open(BytesIO(data)) as img:
                img.thumbnail((self.COMPRESS_MAX_DIMENSION, self.COMPRESS_MAX_DIMENSION))
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")

                result = data
                for quality in self.COMPRESS_QUALITIES:
                    buffer = BytesIO()
                    img.save(buffer, format="JPEG", quality=quality, optimize=True)
                    result = buffer.getvalue()
                    if len(result) <= self.COMPRESS_TARGET_SIZE:
                        break
        except Exception as e:
            logger.warning(f"Error compressing image, using original: {e}")
            return data

        logger.info(
            f"Image compressed: {len(data) / 1024:.2f}KB -> {len(result) / 1024:.2f}KB"
        )
        return result

    def check_document_size(self, images: Iterable[str]) -> int:
        """
        Проверить суммарный размер base64-изображений в документе товара.

        Args:
            images: URL изображений товара (главное и галерея)

        Returns:
            int: Оценка размера встроенных изображений в байтах

        Raises:
            ValidationFailure: Если изображения не помещаются в документ
        """
        total_size = 0.0
        inline_count = 0
        for image in images:
            if image and image.startswith("data:"):
                inline_count += 1
                payload = image.split(",", 1)[1] if "," in image else ""
                total_size += len(payload) * 0.75

        if total_size > self.MAX_DOCUMENT_IMAGES_SIZE:
            size_mb = total_size / 1024 / 1024
            raise ValidationFailure(
                f"Images take up too much space ({size_mb:.2f}MB). "
                "A product document can hold at most 1MB. "
                "Use fewer images (3-4 at most), compress them before uploading, "
                "or upload them to the image host and store their URLs instead."
            )

        if inline_count > 2:
            logger.warning(
                f"Product uses {inline_count} inline base64 images, "
                "this fills the document size limit quickly"
            )
        return int(total_size)


# Глобальный экземпляр сервиса
image_service = ImageService()
