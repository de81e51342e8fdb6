"""
Выбор реализации репозитория каталогов.

SQL хранилище по DATABASE_URL или демо-данные в памяти,
если хранилище не настроено.
"""

import logging
from functools import lru_cache
from typing import Generator

from app.core.config import settings
from app.db.database import SessionLocal, get_engine
from app.repositories.base import CatalogRepository
from app.repositories.memory import InMemoryCatalogRepository
from app.repositories.mock_data import build_mock_repository
from app.repositories.sql import SqlCatalogRepository

logger = logging.getLogger(__name__)


@lru_cache()
def get_mock_repository() -> InMemoryCatalogRepository:
    logger.warning("DATABASE_URL is not set, serving mock catalog data")
    return build_mock_repository()


def get_repository() -> Generator[CatalogRepository, None, None]:
    """
    Dependency для получения репозитория каталогов.

    Note:
        SQL сессия закрывается после обработки запроса
    """
    if settings.MOCK_MODE:
        yield get_mock_repository()
        return

    db = SessionLocal(bind=get_engine())
    try:
        yield SqlCatalogRepository(db)
    finally:
        db.close()
