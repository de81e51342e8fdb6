"""
Схемы категорий.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, as_utc


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Название категории")
    description: Optional[str] = None
    color: Optional[str] = Field(None, description="Цвет для визуального выделения")


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None


class Category(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    catalog_id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class CategoryCount(CamelModel):
    """Категория и количество товаров в ней (для фильтра витрины)."""

    name: str
    count: int
