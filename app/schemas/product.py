"""
Схемы товаров.
"""

from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.schemas.category import CategoryCount
from app.schemas.common import CamelModel


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, description="Название товара")
    description: str = Field("", description="Описание товара")
    price: float = Field(0, ge=0, description="Цена (0 - цена не отображается)")
    image: str = Field("", description="URL главного изображения")
    images: List[str] = Field(default_factory=list, description="Галерея изображений")
    category: str = Field("", description="Название категории")
    stock: Optional[int] = Field(None, ge=0, description="Остаток (None - не отслеживается)")
    sku: Optional[str] = Field(None, description="Артикул")


class ProductCreate(ProductBase):
    """Схема для создания товара."""


class ProductUpdate(CamelModel):
    """Схема для обновления товара (все поля опциональны)."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    images: Optional[List[str]] = None
    category: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None


class Product(ProductBase):
    """
    Товар, прочитанный из хранилища.

    Отсутствующие в документе поля получают значения по умолчанию здесь,
    а не в местах использования.
    """

    id: str
    name: str = ""
    catalog_id: Optional[str] = Field(None, description="ID каталога (None - товар без каталога)")

    @field_validator("name", "description", "image", "category", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("price", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("images", mode="before")
    @classmethod
    def _none_as_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ProductSearchResult(CamelModel):
    """Ответ публичного эндпоинта searchProducts."""

    products: List[Product]


class ProductListing(CamelModel):
    """Отфильтрованные товары витрины вместе со счетчиками категорий."""

    items: List[Product]
    categories: List[CategoryCount]
    total: int
