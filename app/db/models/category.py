"""
Модель категории товаров.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class Category(Base):
    """
    Модель категории товаров внутри каталога.

    Категория - только метка: товары хранят название категории текстом,
    поэтому удаление категории не затрагивает товары.

    Attributes:
        id: Уникальный идентификатор категории
        name: Название категории
        color: Цвет для визуального выделения
        catalog_id: ID каталога-владельца
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    catalog_id: Mapped[str] = mapped_column(String(64), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
