"""
Фильтрация товаров витрины по категории и поисковому запросу.

Чистые функции без ввода-вывода: результат зависит только от аргументов.
"""

from collections import Counter
from typing import Iterable, List

from app.schemas.category import CategoryCount
from app.schemas.product import Product

# Псевдо-категория "все товары"
ALL_CATEGORIES = "all"


def search_text(product: Product) -> str:
    """Текст, по которому выполняется поиск: название, описание и категория."""
    return f"{product.name} {product.description} {product.category}".lower()


def matches_query(product: Product, query: str) -> bool:
    """Пустой запрос подходит любому товару."""
    return query.lower() in search_text(product)


def search_products(products: Iterable[Product], query: str) -> List[Product]:
    """Поиск подстроки без учета регистра, без фильтра по категории."""
    return [product for product in products if matches_query(product, query)]


def filter_products(
    products: Iterable[Product],
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> List[Product]:
    """
    Получить видимое подмножество товаров.

    Сначала применяется фильтр по категории (точное совпадение с учетом
    регистра), затем текстовый поиск. Порядок товаров сохраняется.

    Args:
        products: Товары каталога
        query: Поисковый запрос (пустой - без текстового фильтра)
        category: Название категории или "all"

    Returns:
        List[Product]: Новый список подходящих товаров
    """
    visible = list(products)
    if category != ALL_CATEGORIES:
        visible = [product for product in visible if product.category == category]
    if query:
        visible = search_products(visible, query)
    return visible


def enumerate_categories(products: Iterable[Product]) -> List[CategoryCount]:
    """
    Перечислить категории каталога с количеством товаров.

    Первой всегда идет псевдо-категория "all" с общим количеством,
    далее уникальные категории в порядке сортировки строк.
    """
    items = list(products)
    counts = Counter(product.category for product in items)
    result = [CategoryCount(name=ALL_CATEGORIES, count=len(items))]
    result.extend(CategoryCount(name=name, count=counts[name]) for name in sorted(counts))
    return result
