"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .base import Base
from .catalog import Catalog
from .category import Category
from .client import Client
from .product import Product
from .user import User

__all__ = [
    "Base",
    "Catalog",
    "Category",
    "Client",
    "Product",
    "User",
]
