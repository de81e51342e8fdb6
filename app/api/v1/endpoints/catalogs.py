"""
Публичные эндпоинты витрины каталога.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_resolver
from app.schemas.catalog import CatalogWithProducts
from app.schemas.category import CategoryCount
from app.schemas.product import ProductListing
from app.schemas.stats import CatalogStats
from app.services.catalog_resolver import CatalogResolver
from app.services.product_filter import ALL_CATEGORIES, enumerate_categories, filter_products
from app.services.stats import aggregate

router = APIRouter()


@router.get("/{slug}", response_model=CatalogWithProducts)
def get_catalog(slug: str, resolver: CatalogResolver = Depends(get_resolver)):
    """
    Получить каталог по slug.

    Args:
        slug: Slug каталога (точное совпадение)

    Returns:
        CatalogWithProducts: Каталог и его товары

    Raises:
        NotFound: Каталог не найден
    """
    return resolver.resolve(slug)


@router.get("/{slug}/products", response_model=ProductListing)
def list_catalog_products(
    slug: str,
    q: str = Query("", description="Поиск по названию, описанию и категории"),
    category: str = Query(ALL_CATEGORIES, description="Категория или 'all'"),
    resolver: CatalogResolver = Depends(get_resolver),
):
    """Товары каталога с фильтром по категории и поиском."""
    catalog = resolver.resolve(slug)
    items = filter_products(catalog.products, q, category)
    return ProductListing(
        items=items,
        categories=enumerate_categories(catalog.products),
        total=len(items),
    )


@router.get("/{slug}/categories", response_model=List[CategoryCount])
def list_catalog_categories(slug: str, resolver: CatalogResolver = Depends(get_resolver)):
    return enumerate_categories(resolver.resolve(slug).products)


@router.get("/{slug}/stats", response_model=CatalogStats)
def get_catalog_stats(slug: str, resolver: CatalogResolver = Depends(get_resolver)):
    return aggregate(resolver.resolve(slug).products)
