"""
Схемы статистики каталога.
"""

from typing import List

from pydantic import Field

from app.schemas.common import CamelModel


class CatalogStats(CamelModel):
    """
    Сводные показатели по набору товаров.

    Attributes:
        total_count: Количество товаров
        total_value: Сумма цен
        distinct_categories: Уникальные категории (отсортированы)
        in_stock_count: Товары с остатком больше нуля
        out_of_stock_count: Товары с нулевым остатком
        untracked_count: Товары без учета остатка
        total_units: Суммарный остаток по отслеживаемым товарам
    """

    total_count: int = 0
    total_value: float = 0
    distinct_categories: List[str] = Field(default_factory=list)
    in_stock_count: int = 0
    out_of_stock_count: int = 0
    untracked_count: int = 0
    total_units: int = 0


class CatalogStatsOut(CamelModel):
    """Ответ публичного эндпоинта getCatalogStats."""

    total_products: int
    total_value: float
    categories: List[str]
    in_stock: int
    out_of_stock: int
    untracked: int

    @classmethod
    def from_stats(cls, stats: CatalogStats) -> "CatalogStatsOut":
        return cls(
            total_products=stats.total_count,
            total_value=stats.total_value,
            categories=stats.distinct_categories,
            in_stock=stats.in_stock_count,
            out_of_stock=stats.out_of_stock_count,
            untracked=stats.untracked_count,
        )


class DashboardSummary(CamelModel):
    """Общая статистика дашборда администратора/клиента."""

    total_catalogs: int
    total_clients: int
    stats: CatalogStats
