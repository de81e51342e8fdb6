"""
Абстрактный репозиторий каталогов.

Единый интерфейс доступа к коллекциям catalogs, products, categories,
users и clients независимо от типа хранилища.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from app.core.errors import DuplicateSlug, InvalidInput
from app.schemas.admin import Client, ClientCreate, UserCreate, UserInDB
from app.schemas.catalog import Catalog, CatalogCreate, CatalogUpdate
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.product import Product, ProductCreate, ProductUpdate
from app.utils.slug import generate_slug, is_valid_slug


class CatalogRepository(ABC):
    """
    Абстрактный базовый класс для хранилищ каталогов.

    Поиск одной записи по ID выбрасывает NotFound, запросы коллекций
    возвращают пустой список, если ничего не найдено.
    """

    # ---------- Каталоги ----------

    @abstractmethod
    def find_catalog_by_slug(self, slug: str) -> Optional[Catalog]:
        """Первый каталог с точно совпадающим slug или None."""

    @abstractmethod
    def get_catalog(self, catalog_id: str) -> Catalog:
        pass

    @abstractmethod
    def list_catalogs(self) -> List[Catalog]:
        pass

    @abstractmethod
    def list_catalogs_for_client(self, client_id: str) -> List[Catalog]:
        pass

    @abstractmethod
    def create_catalog(self, data: CatalogCreate) -> Catalog:
        pass

    @abstractmethod
    def update_catalog(self, catalog_id: str, data: CatalogUpdate) -> Catalog:
        pass

    @abstractmethod
    def delete_catalog(self, catalog_id: str) -> None:
        """Удалить каталог вместе с его товарами и категориями."""

    # ---------- Товары ----------

    @abstractmethod
    def list_products(self, catalog_id: str) -> List[Product]:
        pass

    @abstractmethod
    def list_all_products(self) -> List[Product]:
        pass

    @abstractmethod
    def get_product(self, product_id: str) -> Product:
        pass

    @abstractmethod
    def create_product(self, catalog_id: str, data: ProductCreate) -> Product:
        pass

    @abstractmethod
    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        pass

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        pass

    @abstractmethod
    def assign_product_catalog(self, product_id: str, catalog_id: str) -> Product:
        pass

    # ---------- Категории ----------

    @abstractmethod
    def list_categories(self, catalog_id: str) -> List[Category]:
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Category:
        pass

    @abstractmethod
    def create_category(self, catalog_id: str, data: CategoryCreate) -> Category:
        pass

    @abstractmethod
    def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        pass

    # ---------- Пользователи и клиенты ----------

    @abstractmethod
    def get_user(self, user_id: str) -> UserInDB:
        pass

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[UserInDB]:
        pass

    @abstractmethod
    def list_users(self) -> List[UserInDB]:
        pass

    @abstractmethod
    def create_user(self, data: UserCreate, hashed_password: str) -> UserInDB:
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        pass

    @abstractmethod
    def list_clients(self) -> List[Client]:
        pass

    @abstractmethod
    def get_client(self, client_id: str) -> Client:
        pass

    @abstractmethod
    def create_client(self, data: ClientCreate) -> Client:
        pass

    # ---------- Общие проверки ----------

    def _prepare_slug(
        self, slug: Optional[str], name: str, catalog_id: Optional[str] = None
    ) -> str:
        """
        Вычислить slug для записи и проверить его уникальность.

        Args:
            slug: Slug из запроса (None - сгенерировать из названия)
            name: Название каталога
            catalog_id: ID обновляемого каталога (не конфликтует сам с собой)

        Raises:
            InvalidInput: Slug пустой или не в нормализованной форме
            DuplicateSlug: Slug уже занят другим каталогом
        """
        value = generate_slug(name) if slug is None else slug
        if not is_valid_slug(value):
            raise InvalidInput(f"Invalid slug: '{value}'")

        existing = self.find_catalog_by_slug(value)
        if existing is not None and existing.id != catalog_id:
            raise DuplicateSlug(f"Slug '{value}' is already used by another catalog")
        return value
