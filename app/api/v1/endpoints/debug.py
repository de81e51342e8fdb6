"""
Debug endpoints для диагностики и отладки.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_repository
from app.core.config import settings
from app.db.database import SessionLocal, get_engine
from app.db.models import Base
from app.repositories.base import CatalogRepository
from app.services.diagnostics import find_orphan_products, products_per_catalog

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/store-ping")
def store_ping():
    """
    Проверка подключения к хранилищу.

    Returns:
        dict: Статус подключения и список найденных/отсутствующих таблиц
    """
    if settings.MOCK_MODE:
        return {"ok": True, "mode": "mock"}

    engine = get_engine()
    try:
        with SessionLocal(bind=engine) as db:
            ping_ok = db.execute(text("SELECT 1")).scalar() == 1
        existing = set(inspect(engine).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Store ping failed: {e}")
        return {"ok": False, "mode": "sql", "error": str(e)}

    expected = sorted(Base.metadata.tables)
    return {
        "ok": ping_ok,
        "mode": "sql",
        "dialect": engine.dialect.name,
        "tables_present": [table for table in expected if table in existing],
        "tables_missing": [table for table in expected if table not in existing],
    }


@router.get("/orphans")
def orphan_products(repository: CatalogRepository = Depends(get_repository)):
    """
    Товары, не привязанные ни к одному существующему каталогу.

    Returns:
        dict: Осиротевшие товары и количество товаров по каталогам
    """
    orphans = find_orphan_products(repository)
    return {
        "count": len(orphans),
        "orphans": [
            {"id": product.id, "name": product.name, "catalogId": product.catalog_id}
            for product in orphans
        ],
        "productsPerCatalog": products_per_catalog(repository),
    }
