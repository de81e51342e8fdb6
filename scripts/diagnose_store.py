#!/usr/bin/env python3
"""
Диагностика связей товаров и каталогов в хранилище.

Показывает количество товаров по каталогам и товары без каталога.
С флагом --fix привязывает такие товары к указанному каталогу.
"""

import argparse
import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.repositories.provider import get_mock_repository
from app.core.config import settings
from app.core.errors import CatalogError
from app.db.database import SessionLocal, get_engine
from app.repositories.base import CatalogRepository
from app.repositories.sql import SqlCatalogRepository
from app.services.diagnostics import find_orphan_products, products_per_catalog, reassign_orphans


def diagnose(repository: CatalogRepository, fix_catalog_id: str = None) -> bool:
    print("🔍 Проверка каталогов...")
    catalogs = {catalog.id: catalog for catalog in repository.list_catalogs()}
    for catalog_id, count in products_per_catalog(repository).items():
        catalog = catalogs[catalog_id]
        print(f"  - {catalog.name} ({catalog.slug}): {count} товаров")

    orphans = find_orphan_products(repository)
    print(f"\n📋 Товаров без каталога: {len(orphans)}")
    for product in orphans:
        print(f"  - {product.id}: {product.name} (catalogId={product.catalog_id!r})")

    if fix_catalog_id and orphans:
        try:
            fixed = reassign_orphans(repository, fix_catalog_id)
        except CatalogError as e:
            print(f"❌ {e.message}")
            return False
        print(f"✅ Привязано к каталогу {fix_catalog_id}: {len(fixed)}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Диагностика хранилища каталогов")
    parser.add_argument("--fix", metavar="CATALOG_ID", help="Привязать товары без каталога")
    args = parser.parse_args()

    if settings.MOCK_MODE:
        ok = diagnose(get_mock_repository(), args.fix)
    else:
        with SessionLocal(bind=get_engine()) as db:
            ok = diagnose(SqlCatalogRepository(db), args.fix)
    if not ok:
        sys.exit(1)
