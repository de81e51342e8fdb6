"""
Состояние сессии просмотра каталога.

Хранит текущий загруженный каталог, статус загрузки и сообщение об ошибке.
Каждый запрос загрузки получает токен; результат применяется только если
его токен совпадает с последним выданным, поэтому ответ на устаревший
запрос, пришедший позже нового, отбрасывается.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from app.core.errors import InvalidInput, NotFound
from app.schemas.catalog import CatalogWithProducts
from app.schemas.category import CategoryCount
from app.schemas.product import Product
from app.services.catalog_resolver import CatalogResolver
from app.services.product_filter import ALL_CATEGORIES, enumerate_categories, filter_products

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Catalog not found"
LOAD_FAILED_MESSAGE = "Failed to load catalog"


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class CatalogSession:
    """
    Контейнер состояния каталога для слоя представления.

    Переходы: idle -> loading -> loaded | error. Повторная загрузка
    возможна из любого состояния. Автоматических повторов нет.
    """

    def __init__(self, resolver: CatalogResolver):
        self.resolver = resolver
        self.status = LoadStatus.IDLE
        self.catalog: Optional[CatalogWithProducts] = None
        self.error: Optional[str] = None
        self.slug: Optional[str] = None
        self._generation = 0

    def begin_load(self, slug: str) -> int:
        """Перейти в состояние loading и выдать токен нового запроса."""
        self._generation += 1
        self.status = LoadStatus.LOADING
        self.catalog = None
        self.error = None
        self.slug = slug
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def complete(self, token: int, catalog: CatalogWithProducts) -> bool:
        """
        Применить успешный результат загрузки.

        Returns:
            bool: False, если токен устарел и результат отброшен
        """
        if not self.is_current(token):
            logger.info(f"Discarding stale catalog result for '{catalog.slug}'")
            return False
        self.status = LoadStatus.LOADED
        self.catalog = catalog
        self.error = None
        return True

    def fail(self, token: int, message: str) -> bool:
        """Применить ошибку загрузки (предыдущий каталог не сохраняется)."""
        if not self.is_current(token):
            logger.info(f"Discarding stale catalog error: {message}")
            return False
        self.status = LoadStatus.ERROR
        self.catalog = None
        self.error = message
        return True

    def _fail_with(self, token: int, slug: str, error: Exception) -> None:
        if isinstance(error, NotFound):
            message = NOT_FOUND_MESSAGE
        elif isinstance(error, InvalidInput):
            message = error.message
        else:
            logger.error(f"Error loading catalog '{slug}': {error}")
            message = LOAD_FAILED_MESSAGE
        self.fail(token, message)

    def load(self, slug: str) -> LoadStatus:
        """Загрузить каталог синхронно."""
        token = self.begin_load(slug)
        try:
            catalog = self.resolver.resolve(slug)
        except Exception as e:
            self._fail_with(token, slug, e)
        else:
            self.complete(token, catalog)
        return self.status

    async def load_async(self, slug: str) -> LoadStatus:
        """
        Загрузить каталог, не блокируя цикл событий.

        Обращение к хранилищу выполняется в пуле потоков. Если за время
        ожидания был запущен новый запрос, результат этого будет отброшен.
        """
        token = self.begin_load(slug)
        loop = asyncio.get_running_loop()
        try:
            catalog = await loop.run_in_executor(None, self.resolver.resolve, slug)
        except Exception as e:
            self._fail_with(token, slug, e)
        else:
            self.complete(token, catalog)
        return self.status

    # ---------- Представление ----------

    def visible_products(self, query: str = "", category: str = ALL_CATEGORIES) -> List[Product]:
        if self.catalog is None:
            return []
        return filter_products(self.catalog.products, query, category)

    def categories(self) -> List[CategoryCount]:
        if self.catalog is None:
            return []
        return enumerate_categories(self.catalog.products)
