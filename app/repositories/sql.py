"""
Репозиторий каталогов поверх SQLAlchemy.

Коллекции хранятся плоскими таблицами, товары и категории связаны
с каталогом полем catalog_id. Ошибки хранилища преобразуются
в UpstreamFailure на границе репозитория.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateSlug, NotFound, UpstreamFailure
from app.db import models
from app.db.models.base import utcnow
from app.repositories.base import CatalogRepository
from app.schemas.admin import Client, ClientCreate, UserCreate, UserInDB
from app.schemas.catalog import Catalog, CatalogCreate, CatalogUpdate
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.product import Product, ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class SqlCatalogRepository(CatalogRepository):
    """Репозиторий, работающий через сессию SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Откатить транзакцию и преобразовать ошибку БД в UpstreamFailure."""
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            if "slug" in str(e.orig).lower():
                raise DuplicateSlug() from e
            raise UpstreamFailure(detail=f"{operation}: {e}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store error during {operation}: {e}")
            raise UpstreamFailure(detail=f"{operation}: {e}") from e

    # ---------- Преобразование записей ----------

    @staticmethod
    def _to_catalog(row: models.Catalog) -> Catalog:
        return Catalog.model_validate(row)

    @staticmethod
    def _to_product(row: models.Product) -> Product:
        return Product.model_validate(row)

    @staticmethod
    def _to_category(row: models.Category) -> Category:
        return Category.model_validate(row)

    @staticmethod
    def _to_user(row: models.User) -> UserInDB:
        return UserInDB.model_validate(row)

    def _to_client(self, row: models.Client) -> Client:
        catalog_ids = self.db.scalars(
            select(models.Catalog.id)
            .where(models.Catalog.client_id == row.id)
            .order_by(models.Catalog.created_at)
        ).all()
        return Client(
            id=row.id,
            name=row.name,
            email=row.email,
            phone=row.phone,
            company=row.company,
            status=row.status,
            catalog_ids=list(catalog_ids),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _catalog_row(self, catalog_id: str) -> models.Catalog:
        row = self.db.get(models.Catalog, catalog_id)
        if row is None:
            raise NotFound("Catalog not found")
        return row

    def _product_row(self, product_id: str) -> models.Product:
        row = self.db.get(models.Product, product_id)
        if row is None:
            raise NotFound("Product not found")
        return row

    def _category_row(self, category_id: str) -> models.Category:
        row = self.db.get(models.Category, category_id)
        if row is None:
            raise NotFound("Category not found")
        return row

    def _touch_catalog(self, catalog_id: Optional[str]) -> None:
        if catalog_id is None:
            return
        row = self.db.get(models.Catalog, catalog_id)
        if row is not None:
            row.updated_at = utcnow()

    # ---------- Каталоги ----------

    def find_catalog_by_slug(self, slug: str) -> Optional[Catalog]:
        with self._store_errors("find_catalog_by_slug"):
            row = self.db.scalars(
                select(models.Catalog)
                .where(models.Catalog.slug == slug)
                .order_by(models.Catalog.created_at, models.Catalog.id)
                .limit(1)
            ).first()
            return self._to_catalog(row) if row is not None else None

    def get_catalog(self, catalog_id: str) -> Catalog:
        with self._store_errors("get_catalog"):
            return self._to_catalog(self._catalog_row(catalog_id))

    def list_catalogs(self) -> List[Catalog]:
        with self._store_errors("list_catalogs"):
            rows = self.db.scalars(
                select(models.Catalog).order_by(models.Catalog.created_at, models.Catalog.id)
            ).all()
            return [self._to_catalog(row) for row in rows]

    def list_catalogs_for_client(self, client_id: str) -> List[Catalog]:
        with self._store_errors("list_catalogs_for_client"):
            rows = self.db.scalars(
                select(models.Catalog)
                .where(models.Catalog.client_id == client_id)
                .order_by(models.Catalog.created_at, models.Catalog.id)
            ).all()
            return [self._to_catalog(row) for row in rows]

    def create_catalog(self, data: CatalogCreate) -> Catalog:
        with self._store_errors("create_catalog"):
            slug = self._prepare_slug(data.slug, data.name)
            row = models.Catalog(
                name=data.name,
                slug=slug,
                client_id=data.client_id,
                description=data.description,
                logo=data.logo,
                theme=data.theme.model_dump() if data.theme else None,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return self._to_catalog(row)

    def update_catalog(self, catalog_id: str, data: CatalogUpdate) -> Catalog:
        with self._store_errors("update_catalog"):
            row = self._catalog_row(catalog_id)
            updates = data.model_dump(exclude_unset=True)
            for required in ("name", "client_id"):
                if updates.get(required, "") is None:
                    updates.pop(required)

            # slug меняется только явно, переименование его не трогает
            if updates.get("slug") is not None:
                updates["slug"] = self._prepare_slug(updates["slug"], row.name, catalog_id)
            else:
                updates.pop("slug", None)
            if "theme" in updates:
                updates["theme"] = data.theme.model_dump() if data.theme else None

            for field, value in updates.items():
                setattr(row, field, value)
            row.updated_at = utcnow()

            self.db.commit()
            self.db.refresh(row)
            return self._to_catalog(row)

    def delete_catalog(self, catalog_id: str) -> None:
        with self._store_errors("delete_catalog"):
            row = self._catalog_row(catalog_id)
            deleted_products = self.db.execute(
                delete(models.Product).where(models.Product.catalog_id == catalog_id)
            ).rowcount
            self.db.execute(
                delete(models.Category).where(models.Category.catalog_id == catalog_id)
            )
            self.db.delete(row)
            self.db.commit()
            logger.info(f"Catalog {catalog_id} deleted with {deleted_products} products")

    # ---------- Товары ----------

    def list_products(self, catalog_id: str) -> List[Product]:
        with self._store_errors("list_products"):
            rows = self.db.scalars(
                select(models.Product)
                .where(models.Product.catalog_id == catalog_id)
                .order_by(models.Product.created_at, models.Product.id)
            ).all()
            return [self._to_product(row) for row in rows]

    def list_all_products(self) -> List[Product]:
        with self._store_errors("list_all_products"):
            rows = self.db.scalars(
                select(models.Product).order_by(models.Product.created_at, models.Product.id)
            ).all()
            return [self._to_product(row) for row in rows]

    def get_product(self, product_id: str) -> Product:
        with self._store_errors("get_product"):
            return self._to_product(self._product_row(product_id))

    def create_product(self, catalog_id: str, data: ProductCreate) -> Product:
        with self._store_errors("create_product"):
            self._catalog_row(catalog_id)
            row = models.Product(catalog_id=catalog_id, **data.model_dump())
            self.db.add(row)
            self._touch_catalog(catalog_id)
            self.db.commit()
            self.db.refresh(row)
            return self._to_product(row)

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        with self._store_errors("update_product"):
            row = self._product_row(product_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                if field == "name" and value is None:
                    continue
                setattr(row, field, value)
            self._touch_catalog(row.catalog_id)
            self.db.commit()
            self.db.refresh(row)
            return self._to_product(row)

    def delete_product(self, product_id: str) -> None:
        with self._store_errors("delete_product"):
            row = self._product_row(product_id)
            self._touch_catalog(row.catalog_id)
            self.db.delete(row)
            self.db.commit()

    def assign_product_catalog(self, product_id: str, catalog_id: str) -> Product:
        with self._store_errors("assign_product_catalog"):
            self._catalog_row(catalog_id)
            row = self._product_row(product_id)
            row.catalog_id = catalog_id
            self.db.commit()
            self.db.refresh(row)
            return self._to_product(row)

    # ---------- Категории ----------

    def list_categories(self, catalog_id: str) -> List[Category]:
        with self._store_errors("list_categories"):
            rows = self.db.scalars(
                select(models.Category)
                .where(models.Category.catalog_id == catalog_id)
                .order_by(models.Category.name)
            ).all()
            return [self._to_category(row) for row in rows]

    def get_category(self, category_id: str) -> Category:
        with self._store_errors("get_category"):
            return self._to_category(self._category_row(category_id))

    def create_category(self, catalog_id: str, data: CategoryCreate) -> Category:
        with self._store_errors("create_category"):
            self._catalog_row(catalog_id)
            row = models.Category(catalog_id=catalog_id, **data.model_dump())
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return self._to_category(row)

    def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        with self._store_errors("update_category"):
            row = self._category_row(category_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(row)
            return self._to_category(row)

    def delete_category(self, category_id: str) -> None:
        with self._store_errors("delete_category"):
            row = self._category_row(category_id)
            self.db.delete(row)
            self.db.commit()

    # ---------- Пользователи и клиенты ----------

    def get_user(self, user_id: str) -> UserInDB:
        with self._store_errors("get_user"):
            row = self.db.get(models.User, user_id)
            if row is None:
                raise NotFound("User not found")
            return self._to_user(row)

    def find_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self._store_errors("find_user_by_email"):
            row = self.db.scalars(
                select(models.User).where(models.User.email == email).limit(1)
            ).first()
            return self._to_user(row) if row is not None else None

    def list_users(self) -> List[UserInDB]:
        with self._store_errors("list_users"):
            rows = self.db.scalars(select(models.User).order_by(models.User.created_at)).all()
            return [self._to_user(row) for row in rows]

    def create_user(self, data: UserCreate, hashed_password: str) -> UserInDB:
        with self._store_errors("create_user"):
            row = models.User(
                email=data.email,
                display_name=data.display_name,
                hashed_password=hashed_password,
                role=data.role,
                client_id=data.client_id if data.role == "client" else None,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return self._to_user(row)

    def delete_user(self, user_id: str) -> None:
        with self._store_errors("delete_user"):
            row = self.db.get(models.User, user_id)
            if row is None:
                raise NotFound("User not found")
            self.db.delete(row)
            self.db.commit()

    def list_clients(self) -> List[Client]:
        with self._store_errors("list_clients"):
            rows = self.db.scalars(select(models.Client).order_by(models.Client.name)).all()
            return [self._to_client(row) for row in rows]

    def get_client(self, client_id: str) -> Client:
        with self._store_errors("get_client"):
            row = self.db.get(models.Client, client_id)
            if row is None:
                raise NotFound("Client not found")
            return self._to_client(row)

    def create_client(self, data: ClientCreate) -> Client:
        with self._store_errors("create_client"):
            row = models.Client(**data.model_dump())
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            return self._to_client(row)
