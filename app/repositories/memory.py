"""
Репозиторий каталогов в памяти процесса.

Используется в mock-режиме (без учетных данных хранилища) и в тестах.
Записи хранятся как документы (dict) в порядке вставки и приводятся
к типизированным схемам при чтении.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from app.core.errors import NotFound
from app.db.models.base import new_id, utcnow
from app.repositories.base import CatalogRepository
from app.schemas.admin import Client, ClientCreate, UserCreate, UserInDB
from app.schemas.catalog import Catalog, CatalogCreate, CatalogUpdate
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.product import Product, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

COLLECTIONS = ("catalogs", "products", "categories", "users", "clients")


class InMemoryCatalogRepository(CatalogRepository):
    """Хранилище документов в словарях, по одному на коллекцию."""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {
            name: {} for name in COLLECTIONS
        }

    # ---------- Низкоуровневый доступ к документам ----------

    def insert_document(self, collection: str, document: Document) -> str:
        """
        Вставить документ как есть, без проверок схемы.

        Нужен для начального наполнения и для воспроизведения
        некорректных данных (например, товаров без catalog_id).
        """
        doc = copy.deepcopy(document)
        doc.setdefault("id", new_id())
        now = utcnow()
        if collection != "products":
            doc.setdefault("created_at", now)
            if collection != "users":
                doc.setdefault("updated_at", now)
        self._collections[collection][doc["id"]] = doc
        return doc["id"]

    def _documents(self, collection: str) -> List[Document]:
        return list(self._collections[collection].values())

    def _document(self, collection: str, doc_id: str, label: str) -> Document:
        doc = self._collections[collection].get(doc_id)
        if doc is None:
            raise NotFound(f"{label} not found")
        return doc

    def _touch_catalog(self, catalog_id: Optional[str]) -> None:
        doc = self._collections["catalogs"].get(catalog_id) if catalog_id else None
        if doc is not None:
            doc["updated_at"] = utcnow()

    # ---------- Каталоги ----------

    def find_catalog_by_slug(self, slug: str) -> Optional[Catalog]:
        for doc in self._documents("catalogs"):
            if doc.get("slug") == slug:
                return Catalog.model_validate(doc)
        return None

    def get_catalog(self, catalog_id: str) -> Catalog:
        return Catalog.model_validate(self._document("catalogs", catalog_id, "Catalog"))

    def list_catalogs(self) -> List[Catalog]:
        return [Catalog.model_validate(doc) for doc in self._documents("catalogs")]

    def list_catalogs_for_client(self, client_id: str) -> List[Catalog]:
        return [
            Catalog.model_validate(doc)
            for doc in self._documents("catalogs")
            if doc.get("client_id") == client_id
        ]

    def create_catalog(self, data: CatalogCreate) -> Catalog:
        document = data.model_dump()
        document["slug"] = self._prepare_slug(data.slug, data.name)
        catalog_id = self.insert_document("catalogs", document)
        return self.get_catalog(catalog_id)

    def update_catalog(self, catalog_id: str, data: CatalogUpdate) -> Catalog:
        doc = self._document("catalogs", catalog_id, "Catalog")
        updates = data.model_dump(exclude_unset=True)
        for required in ("name", "client_id"):
            if updates.get(required, "") is None:
                updates.pop(required)

        if updates.get("slug") is not None:
            updates["slug"] = self._prepare_slug(updates["slug"], doc["name"], catalog_id)
        else:
            updates.pop("slug", None)

        doc.update(updates)
        doc["updated_at"] = utcnow()
        return Catalog.model_validate(doc)

    def delete_catalog(self, catalog_id: str) -> None:
        self._document("catalogs", catalog_id, "Catalog")
        removed = 0
        for collection in ("products", "categories"):
            docs = self._collections[collection]
            for doc_id in [k for k, v in docs.items() if v.get("catalog_id") == catalog_id]:
                del docs[doc_id]
                if collection == "products":
                    removed += 1
        del self._collections["catalogs"][catalog_id]
        logger.info(f"Catalog {catalog_id} deleted with {removed} products")

    # ---------- Товары ----------

    def list_products(self, catalog_id: str) -> List[Product]:
        return [
            Product.model_validate(doc)
            for doc in self._documents("products")
            if doc.get("catalog_id") == catalog_id
        ]

    def list_all_products(self) -> List[Product]:
        return [Product.model_validate(doc) for doc in self._documents("products")]

    def get_product(self, product_id: str) -> Product:
        return Product.model_validate(self._document("products", product_id, "Product"))

    def create_product(self, catalog_id: str, data: ProductCreate) -> Product:
        self._document("catalogs", catalog_id, "Catalog")
        product_id = self.insert_document(
            "products", {**data.model_dump(), "catalog_id": catalog_id}
        )
        self._touch_catalog(catalog_id)
        return self.get_product(product_id)

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        doc = self._document("products", product_id, "Product")
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name", "") is None:
            updates.pop("name")
        doc.update(updates)
        self._touch_catalog(doc.get("catalog_id"))
        return Product.model_validate(doc)

    def delete_product(self, product_id: str) -> None:
        doc = self._document("products", product_id, "Product")
        self._touch_catalog(doc.get("catalog_id"))
        del self._collections["products"][product_id]

    def assign_product_catalog(self, product_id: str, catalog_id: str) -> Product:
        self._document("catalogs", catalog_id, "Catalog")
        doc = self._document("products", product_id, "Product")
        doc["catalog_id"] = catalog_id
        return Product.model_validate(doc)

    # ---------- Категории ----------

    def list_categories(self, catalog_id: str) -> List[Category]:
        docs = [
            doc for doc in self._documents("categories") if doc.get("catalog_id") == catalog_id
        ]
        return [Category.model_validate(doc) for doc in sorted(docs, key=lambda d: d["name"])]

    def get_category(self, category_id: str) -> Category:
        return Category.model_validate(self._document("categories", category_id, "Category"))

    def create_category(self, catalog_id: str, data: CategoryCreate) -> Category:
        self._document("catalogs", catalog_id, "Catalog")
        category_id = self.insert_document(
            "categories", {**data.model_dump(), "catalog_id": catalog_id}
        )
        return self.get_category(category_id)

    def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        doc = self._document("categories", category_id, "Category")
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name", "") is None:
            updates.pop("name")
        doc.update(updates)
        doc["updated_at"] = utcnow()
        return Category.model_validate(doc)

    def delete_category(self, category_id: str) -> None:
        self._document("categories", category_id, "Category")
        del self._collections["categories"][category_id]

    # ---------- Пользователи и клиенты ----------

    def get_user(self, user_id: str) -> UserInDB:
        return UserInDB.model_validate(self._document("users", user_id, "User"))

    def find_user_by_email(self, email: str) -> Optional[UserInDB]:
        for doc in self._documents("users"):
            if doc.get("email") == email:
                return UserInDB.model_validate(doc)
        return None

    def list_users(self) -> List[UserInDB]:
        return [UserInDB.model_validate(doc) for doc in self._documents("users")]

    def create_user(self, data: UserCreate, hashed_password: str) -> UserInDB:
        user_id = self.insert_document(
            "users",
            {
                "email": data.email,
                "display_name": data.display_name,
                "hashed_password": hashed_password,
                "role": data.role,
                "client_id": data.client_id if data.role == "client" else None,
            },
        )
        return self.get_user(user_id)

    def delete_user(self, user_id: str) -> None:
        self._document("users", user_id, "User")
        del self._collections["users"][user_id]

    def _to_client(self, doc: Document) -> Client:
        catalog_ids = [
            c["id"] for c in self._documents("catalogs") if c.get("client_id") == doc["id"]
        ]
        return Client.model_validate({**doc, "catalog_ids": catalog_ids})

    def list_clients(self) -> List[Client]:
        docs = sorted(self._documents("clients"), key=lambda d: d["name"])
        return [self._to_client(doc) for doc in docs]

    def get_client(self, client_id: str) -> Client:
        return self._to_client(self._document("clients", client_id, "Client"))

    def create_client(self, data: ClientCreate) -> Client:
        client_id = self.insert_document("clients", data.model_dump())
        return self.get_client(client_id)
