"""
Конфигурация базы данных.

Содержит настройки подключения к хранилищу и фабрику сессий.
В mock-режиме (DATABASE_URL не задан) движок не создается.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


@lru_cache()
def get_engine() -> Engine:
    """
    Создать движок SQLAlchemy по DATABASE_URL.

    Raises:
        RuntimeError: Если приложение работает в mock-режиме
    """
    if settings.MOCK_MODE:
        raise RuntimeError("DATABASE_URL is not configured (mock mode)")

    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Проверка соединения перед использованием
        future=True,
        echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
        connect_args=connect_args,
    )


# Фабрика сессий базы данных (движок подставляется при создании сессии)
SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)


def init_db() -> None:
    """Создать все таблицы, если их еще нет."""
    from app.db.models import Base

    Base.metadata.create_all(bind=get_engine())
