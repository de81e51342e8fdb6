"""
Разрешение slug в каталог вместе с его товарами.
"""

import logging
from typing import Optional

from app.core.errors import InvalidInput, NotFound
from app.repositories.base import CatalogRepository
from app.schemas.catalog import CatalogWithProducts

logger = logging.getLogger(__name__)


class CatalogResolver:
    """
    Находит каталог по slug и загружает его товары.

    Два обращения к хранилищу (каталог, затем товары) независимы:
    товар, добавленный между ними, может как попасть в результат, так и нет.
    """

    def __init__(self, repository: CatalogRepository):
        self.repository = repository

    def resolve(self, slug: Optional[str]) -> CatalogWithProducts:
        """
        Получить каталог по slug.

        Args:
            slug: Slug каталога (точное совпадение, с учетом регистра)

        Returns:
            CatalogWithProducts: Каталог со всеми товарами, у которых
                catalog_id совпадает с ID каталога

        Raises:
            InvalidInput: Если slug не передан или пустая строка
            NotFound: Если каталог с таким slug не существует
        """
        if not slug:
            raise InvalidInput("The slug parameter is required")

        catalog = self.repository.find_catalog_by_slug(slug)
        if catalog is None:
            raise NotFound("Catalog not found")

        products = self.repository.list_products(catalog.id)
        logger.info(f'Catalog "{catalog.name}" loaded with {len(products)} products')

        return CatalogWithProducts(**catalog.model_dump(), products=products)
