"""
Модель каталога.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class Catalog(Base):
    """
    Модель каталога клиента.

    Товары не вложены в каталог: они хранятся в отдельной таблице
    и связаны с ним полем catalog_id.

    Attributes:
        id: Уникальный идентификатор каталога
        name: Название каталога
        slug: Уникальный URL-friendly ключ публичной страницы
        client_id: Идентификатор клиента-владельца
        description: Описание каталога
        logo: URL логотипа
        theme: Настройки оформления (цвета, шрифт, баннер)
    """

    __tablename__ = "catalogs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    client_id: Mapped[str] = mapped_column(String(64), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    theme: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Catalog(id='{self.id}', slug='{self.slug}')>"
