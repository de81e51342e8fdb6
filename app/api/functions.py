"""
Публичные функции каталога.

Доступны без авторизации по корневым путям, их вызывает витрина:
getCatalog, searchProducts и getCatalogStats.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_repository, get_resolver
from app.core.errors import InvalidInput
from app.repositories.base import CatalogRepository
from app.schemas.catalog import CatalogWithProducts
from app.schemas.product import ProductSearchResult
from app.schemas.stats import CatalogStatsOut
from app.services.catalog_resolver import CatalogResolver
from app.services.product_filter import search_products
from app.services.stats import aggregate

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_FUNCTIONS = ("/getCatalog", "/searchProducts", "/getCatalogStats")


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise InvalidInput(f"The {name} parameter is required")
    return value


@router.get("/getCatalog", response_model=CatalogWithProducts)
def get_catalog(
    slug: Optional[str] = Query(None, description="Slug каталога"),
    resolver: CatalogResolver = Depends(get_resolver),
):
    """Получить каталог по slug вместе со всеми его товарами."""
    return resolver.resolve(slug)


@router.get("/searchProducts", response_model=ProductSearchResult)
def search_catalog_products(
    catalog_id: Optional[str] = Query(None, alias="catalogId"),
    query: str = Query("", description="Строка поиска"),
    repository: CatalogRepository = Depends(get_repository),
):
    """
    Поиск товаров каталога по названию, описанию и категории.

    Неизвестный catalogId дает пустой список, а не 404.
    """
    catalog_id = _require(catalog_id, "catalogId")
    products = search_products(repository.list_products(catalog_id), query)
    return ProductSearchResult(products=products)


@router.get("/getCatalogStats", response_model=CatalogStatsOut)
def get_catalog_stats(
    catalog_id: Optional[str] = Query(None, alias="catalogId"),
    repository: CatalogRepository = Depends(get_repository),
):
    catalog_id = _require(catalog_id, "catalogId")
    stats = aggregate(repository.list_products(catalog_id))
    return CatalogStatsOut.from_stats(stats)


def _preflight() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


for _path in PUBLIC_FUNCTIONS:
    router.add_api_route(_path, _preflight, methods=["OPTIONS"], include_in_schema=False)
