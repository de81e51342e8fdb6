"""
Расчет сводной статистики по товарам.
"""

from typing import Iterable, Sequence

from app.schemas.catalog import Catalog
from app.schemas.product import Product
from app.schemas.stats import CatalogStats, DashboardSummary


def aggregate(products: Iterable[Product]) -> CatalogStats:
    """
    Посчитать показатели набора товаров.

    Остаток учитывается в трех состояниях: больше нуля (в наличии),
    ноль (нет в наличии) и отсутствует (не отслеживается).
    """
    stats = CatalogStats()
    total_value = 0.0
    categories = set()

    for product in products:
        stats.total_count += 1
        total_value += product.price or 0
        categories.add(product.category)

        if product.stock is None:
            stats.untracked_count += 1
        elif product.stock > 0:
            stats.in_stock_count += 1
            stats.total_units += product.stock
        else:
            stats.out_of_stock_count += 1

    stats.total_value = round(total_value, 2)
    stats.distinct_categories = sorted(categories)
    return stats


def dashboard_summary(
    catalogs: Sequence[Catalog], products: Iterable[Product]
) -> DashboardSummary:
    """Статистика дашборда: каталоги, клиенты и показатели их товаров."""
    return DashboardSummary(
        total_catalogs=len(catalogs),
        total_clients=len({catalog.client_id for catalog in catalogs}),
        stats=aggregate(products),
    )
