"""
Конфигурация приложения.

Содержит настройки подключения к хранилищу документов, хостингу изображений,
объектному хранилищу и параметры аутентификации.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Настройки приложения, загружаемые из переменных окружения.

    Attributes:
        DATABASE_URL: URL подключения к хранилищу (без него включается mock-режим)
        DEBUG: Режим отладки
        SECRET_KEY: Ключ подписи JWT токенов
        CLOUDINARY_CLOUD_NAME: Имя облака Cloudinary
        CLOUDINARY_UPLOAD_PRESET: Unsigned upload preset Cloudinary
    """

    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="URL подключения к БД. Если не задан, используются демо-данные в памяти",
    )
    DEBUG: bool = Field(default=False, description="Режим отладки")

    # Аутентификация
    SECRET_KEY: str = Field(default="change-me-in-production", description="Ключ подписи JWT")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=480, description="Время жизни токена в минутах"
    )

    # Хостинг изображений (Cloudinary)
    CLOUDINARY_CLOUD_NAME: Optional[str] = Field(default=None, description="Cloud name")
    CLOUDINARY_UPLOAD_PRESET: Optional[str] = Field(default=None, description="Upload preset")
    CLOUDINARY_FOLDER: str = Field(
        default="webriders-catalogos", description="Папка для загружаемых изображений"
    )
    UPLOAD_DELAY_SECONDS: float = Field(
        default=1.0, ge=0, description="Пауза между последовательными загрузками"
    )
    UPLOAD_CONCURRENCY: int = Field(
        default=1, ge=1, description="Количество одновременных загрузок"
    )

    # Объектное хранилище (логотипы, изображения товаров)
    STORAGE_TYPE: str = Field(default="local", description="Тип хранилища: local/s3")
    STORAGE_PATH: str = Field(
        default="./uploads", description="Путь для локального хранения файлов"
    )
    CDN_BASE_URL: str = Field(default="", description="Базовый URL CDN для файлов")
    S3_BUCKET_NAME: str = Field(
        default="catalog-assets", description="Имя S3 bucket для хранения файлов"
    )
    AWS_REGION: str = Field(default="us-east-1", description="AWS регион для S3")
    S3_ENDPOINT_URL: Optional[str] = Field(
        default=None, description="Кастомный endpoint URL для S3 (MinIO и т.д.)"
    )
    AWS_ACCESS_KEY_ID: Optional[str] = Field(default=None, description="AWS Access Key ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = Field(
        default=None, description="AWS Secret Access Key"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def MOCK_MODE(self) -> bool:
        """Mock-режим включается, когда не заданы учетные данные хранилища."""
        return not self.DATABASE_URL


# Глобальный экземпляр настроек
settings = Settings()
