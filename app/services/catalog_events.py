"""
Обработчики событий изменения каталогов.

Вызываются в фоне после ответа клиенту. Пока только логируют изменения;
здесь же место для инвалидации кэша, аудита и уведомлений.
"""

import logging

from app.schemas.catalog import Catalog

logger = logging.getLogger(__name__)


def on_catalog_created(catalog: Catalog) -> None:
    logger.info(
        f"Catalog created: {catalog.id} (slug='{catalog.slug}', client='{catalog.client_id}')"
    )


def on_catalog_updated(before: Catalog, after: Catalog) -> None:
    changed = sorted(
        field
        for field, value in after.model_dump(exclude={"updated_at"}).items()
        if before.model_dump().get(field) != value
    )
    logger.info(f"Catalog updated: {after.id}, changed fields: {changed or 'none'}")
