"""
Схемы каталогов.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, as_utc
from app.schemas.product import Product


class CatalogTheme(CamelModel):
    """Оформление публичной страницы каталога."""

    primary_color: str = Field("#0ea5e9", description="Основной цвет")
    secondary_color: str = Field("#0369a1", description="Дополнительный цвет")
    font_family: Optional[str] = None
    banner_image: Optional[str] = None


class CatalogCreate(CamelModel):
    """
    Схема для создания каталога.

    Если slug не передан, он генерируется из названия.
    """

    name: str = Field(..., min_length=1, description="Название каталога")
    slug: Optional[str] = Field(None, description="URL-slug каталога")
    client_id: str = Field(..., min_length=1, description="ID клиента-владельца")
    description: str = ""
    logo: Optional[str] = None
    theme: Optional[CatalogTheme] = None


class CatalogUpdate(CamelModel):
    """Схема для обновления каталога."""

    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = None
    client_id: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    logo: Optional[str] = None
    theme: Optional[CatalogTheme] = None


class Catalog(CamelModel):
    id: str
    name: str
    slug: str
    client_id: str
    description: str = ""
    logo: Optional[str] = None
    theme: Optional[CatalogTheme] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class CatalogWithProducts(Catalog):
    """Каталог вместе с его товарами (результат разрешения slug)."""

    products: List[Product] = Field(default_factory=list)
