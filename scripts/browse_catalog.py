#!/usr/bin/env python3
"""
Просмотр каталога из консоли.

Загружает каталог по slug так же, как витрина, и выводит
отфильтрованные товары, категории и статистику.

Пример:
    python scripts/browse_catalog.py tienda-ejemplo --category "Categoría 1" -q producto
"""

import argparse
import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.repositories.provider import get_mock_repository
from app.core.config import settings
from app.db.database import SessionLocal, get_engine
from app.repositories.sql import SqlCatalogRepository
from app.services.catalog_resolver import CatalogResolver
from app.services.catalog_session import CatalogSession, LoadStatus
from app.services.product_filter import ALL_CATEGORIES
from app.services.stats import aggregate


def browse(slug: str, query: str, category: str) -> bool:
    if settings.MOCK_MODE:
        print("ℹ️ DATABASE_URL не задан, используются демо-данные")
        return show(CatalogSession(CatalogResolver(get_mock_repository())), slug, query, category)

    with SessionLocal(bind=get_engine()) as db:
        session = CatalogSession(CatalogResolver(SqlCatalogRepository(db)))
        return show(session, slug, query, category)


def show(session: CatalogSession, slug: str, query: str, category: str) -> bool:
    if session.load(slug) != LoadStatus.LOADED:
        print(f"❌ {session.error}")
        return False

    catalog = session.catalog
    print(f"📦 {catalog.name} ({catalog.slug})")
    if catalog.description:
        print(f"   {catalog.description}")

    print("\nКатегории:")
    for item in session.categories():
        marker = "*" if item.name == category else " "
        print(f" {marker} {item.name} ({item.count})")

    products = session.visible_products(query, category)
    print(f"\nТовары: {len(products)}")
    for product in products:
        stock = "-" if product.stock is None else product.stock
        print(f"  - {product.name:<40} {product.price:>10.2f}  остаток: {stock}")

    stats = aggregate(catalog.products)
    print(
        f"\nВсего: {stats.total_count}, сумма: {stats.total_value:.2f}, "
        f"в наличии: {stats.in_stock_count}, нет: {stats.out_of_stock_count}, "
        f"без учета: {stats.untracked_count}"
    )
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Просмотр каталога")
    parser.add_argument("slug", help="Slug каталога")
    parser.add_argument("-q", "--query", default="", help="Строка поиска")
    parser.add_argument("-c", "--category", default=ALL_CATEGORIES, help="Категория")
    args = parser.parse_args()

    if not browse(args.slug, args.query, args.category):
        sys.exit(1)
