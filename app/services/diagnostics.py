"""
Диагностика связей между каталогами и товарами.
"""

import logging
from typing import Dict, List

from app.repositories.base import CatalogRepository
from app.schemas.product import Product

logger = logging.getLogger(__name__)


def find_orphan_products(repository: CatalogRepository) -> List[Product]:
    """Товары без catalog_id или с catalog_id несуществующего каталога."""
    catalog_ids = {catalog.id for catalog in repository.list_catalogs()}
    return [
        product
        for product in repository.list_all_products()
        if not product.catalog_id or product.catalog_id not in catalog_ids
    ]


def products_per_catalog(repository: CatalogRepository) -> Dict[str, int]:
    """Количество товаров в каждом каталоге (ключ - ID каталога)."""
    counts = {catalog.id: 0 for catalog in repository.list_catalogs()}
    for product in repository.list_all_products():
        if product.catalog_id in counts:
            counts[product.catalog_id] += 1
    return counts


def reassign_orphans(repository: CatalogRepository, catalog_id: str) -> List[Product]:
    """
    Привязать все "осиротевшие" товары к указанному каталогу.

    Raises:
        NotFound: Если каталог не существует
    """
    repository.get_catalog(catalog_id)
    fixed = []
    for product in find_orphan_products(repository):
        fixed.append(repository.assign_product_catalog(product.id, catalog_id))
        logger.info(f"Product {product.id}: '{product.catalog_id}' -> '{catalog_id}'")
    return fixed
