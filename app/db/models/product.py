"""
Модель товара.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        catalog_id: ID каталога-владельца (NULL означает "осиротевший" товар)
        name: Название товара
        description: Описание товара
        price: Цена (0 или NULL - цена не отображается)
        image: URL главного изображения
        images: Дополнительные изображения галереи
        category: Название категории (свободный текст, не внешний ключ)
        stock: Остаток (NULL - не отслеживается)
        sku: Артикул
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    catalog_id: Mapped[Optional[str]] = mapped_column(String(64), index=True, nullable=True)
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    images: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stock: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sku: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Product(id='{self.id}', name='{self.name}')>"
