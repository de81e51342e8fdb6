"""
API эндпоинты для административной панели.

Администратор управляет всеми каталогами, клиентами и пользователями.
Пользователь с ролью client видит и редактирует только каталоги
своего клиента.
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile, status

from app.api.deps import get_repository
from app.core.auth import auth_service, ensure_catalog_access, get_current_user, require_admin
from app.core.config import settings
from app.core.errors import NotFound, PermissionDenied, Unauthorized, ValidationFailure
from app.repositories.base import CatalogRepository
from app.schemas.admin import (
    Client,
    ClientCreate,
    LoginRequest,
    LoginResponse,
    User,
    UserCreate,
)
from app.schemas.catalog import Catalog, CatalogCreate, CatalogUpdate
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.product import Product, ProductCreate, ProductUpdate
from app.schemas.stats import DashboardSummary
from app.services.catalog_events import on_catalog_created, on_catalog_updated
from app.services.image_service import image_service
from app.services.image_upload import BatchUploader, BatchUploadResult, CloudinaryUploader, ImageFile
from app.services.stats import dashboard_summary
from app.services.storage_service import AssetStorage, get_asset_storage

logger = logging.getLogger(__name__)

router = APIRouter()


def get_batch_uploader() -> BatchUploader:
    """Dependency загрузчика изображений на хостинг."""
    return BatchUploader(
        CloudinaryUploader(),
        concurrency=settings.UPLOAD_CONCURRENCY,
        delay=settings.UPLOAD_DELAY_SECONDS,
    )


def _visible_catalogs(repository: CatalogRepository, user: User) -> List[Catalog]:
    if user.is_admin():
        return repository.list_catalogs()
    if not user.client_id:
        return []
    return repository.list_catalogs_for_client(user.client_id)


def _accessible_catalog(repository: CatalogRepository, user: User, catalog_id: str) -> Catalog:
    catalog = repository.get_catalog(catalog_id)
    ensure_catalog_access(user, catalog)
    return catalog


def _accessible_product(repository: CatalogRepository, user: User, product_id: str) -> Product:
    product = repository.get_product(product_id)
    if not product.catalog_id:
        # Товар без каталога доступен только через диагностику
        raise NotFound("Catalog not found")
    _accessible_catalog(repository, user, product.catalog_id)
    return product


# ==================== АУТЕНТИФИКАЦИЯ ====================


@router.post("/auth/login", response_model=LoginResponse)
def admin_login(login_data: LoginRequest, repository: CatalogRepository = Depends(get_repository)):
    """
    Вход в административную панель.

    Args:
        login_data: Данные для входа (email, password)

    Returns:
        JWT токен и информация о пользователе

    Raises:
        Unauthorized: При неверных учетных данных
    """
    user = auth_service.authenticate(repository, login_data.email, login_data.password)
    if user is None:
        logger.info(f"Failed login attempt for {login_data.email}")
        raise Unauthorized("Incorrect email or password")

    logger.info(f"User {user.email} logged in (role={user.role})")
    return LoginResponse(
        access_token=auth_service.create_access_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=user,
    )


@router.get("/auth/me", response_model=User)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Получение информации о текущем пользователе."""
    return current_user


# ==================== ДАШБОРД ====================


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    """Статистика по каталогам, доступным текущему пользователю."""
    catalogs = _visible_catalogs(repository, current_user)
    catalog_ids = {catalog.id for catalog in catalogs}
    products = [
        product
        for product in repository.list_all_products()
        if product.catalog_id in catalog_ids
    ]
    return dashboard_summary(catalogs, products)


# ==================== КАТАЛОГИ ====================


@router.get("/catalogs", response_model=List[Catalog])
def list_catalogs(
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    return _visible_catalogs(repository, current_user)


@router.post("/catalogs", response_model=Catalog, status_code=status.HTTP_201_CREATED)
def create_catalog(
    catalog_data: CatalogCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    """
    Создание нового каталога.

    Если slug не передан, он генерируется из названия. Занятый slug
    приводит к ошибке 409.
    """
    repository.get_client(catalog_data.client_id)
    catalog = repository.create_catalog(catalog_data)
    background_tasks.add_task(on_catalog_created, catalog)
    return catalog


@router.get("/catalogs/{catalog_id}", response_model=Catalog)
def get_catalog(
    catalog_id: str,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    return _accessible_catalog(repository, current_user, catalog_id)


@router.put("/catalogs/{catalog_id}", response_model=Catalog)
def update_catalog(
    catalog_id: str,
    catalog_data: CatalogUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    """Обновление каталога владельцем или администратором."""
    before = _accessible_catalog(repository, current_user, catalog_id)
    if (
        not current_user.is_admin()
        and catalog_data.client_id is not None
        and catalog_data.client_id != before.client_id
    ):
        raise PermissionDenied("Only administrators can change the catalog owner")

    after = repository.update_catalog(catalog_id, catalog_data)
    background_tasks.add_task(on_catalog_updated, before, after)
    return after


@router.delete("/catalogs/{catalog_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_catalog(
    catalog_id: str,
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    """Удаление каталога вместе с его товарами и категориями."""
    repository.delete_catalog(catalog_id)


@router.post("/catalogs/{catalog_id}/logo", response_model=Catalog)
async def upload_catalog_logo(
    catalog_id: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
    storage: AssetStorage = Depends(get_asset_storage),
):
    """Загрузка логотипа каталога в объектное хранилище (до 2MB)."""
    _accessible_catalog(repository, current_user, catalog_id)
    data = await file.read()
    url = storage.upload_catalog_logo(catalog_id, file.filename or "logo", data, file.content_type)
    return repository.update_catalog(catalog_id, CatalogUpdate(logo=url))


# ==================== ТОВАРЫ ====================


@router.get("/catalogs/{catalog_id}/products", response_model=List[Product])
def list_products(
    catalog_id: str,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    _accessible_catalog(repository, current_user, catalog_id)
    return repository.list_products(catalog_id)


@router.post(
    "/catalogs/{catalog_id}/products",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    catalog_id: str,
    product_data: ProductCreate,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    """
    Создание товара в каталоге.

    Встроенные base64-изображения не должны превышать лимит документа.
    """
    _accessible_catalog(repository, current_user, catalog_id)
    image_service.check_document_size([product_data.image, *product_data.images])
    return repository.create_product(catalog_id, product_data)


@router.put("/products/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    product = _accessible_product(repository, current_user, product_id)
    image = product_data.image if product_data.image is not None else product.image
    images = product_data.images if product_data.images is not None else product.images
    image_service.check_document_size([image, *images])
    return repository.update_product(product_id, product_data)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    _accessible_product(repository, current_user, product_id)
    repository.delete_product(product_id)


@router.post("/products/{product_id}/image", response_model=Product)
async def upload_product_image(
    product_id: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
    storage: AssetStorage = Depends(get_asset_storage),
):
    """
    Загрузка изображения товара в объектное хранилище (до 5MB).

    Первое изображение становится главным, следующие добавляются в галерею.
    """
    product = _accessible_product(repository, current_user, product_id)
    data = await file.read()
    url = storage.upload_product_image(
        product.catalog_id, product.id, file.filename or "image", data, file.content_type
    )
    if product.image:
        update = ProductUpdate(images=[*product.images, url])
    else:
        update = ProductUpdate(image=url)
    return repository.update_product(product_id, update)


# ==================== ИЗОБРАЖЕНИЯ ====================


@router.post("/images/upload", response_model=BatchUploadResult)
async def upload_images(
    files: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
    uploader: BatchUploader = Depends(get_batch_uploader),
):
    """
    Загрузка изображений на хостинг.

    Файлы загружаются по очереди с паузой между ними. Ответ содержит
    URL успешно загруженных файлов в исходном порядке и список ошибок.
    """
    images = [
        ImageFile(filename=file.filename or "image", content_type=file.content_type, data=await file.read())
        for file in files
    ]
    result = await uploader.upload_all(images)
    if not result.urls and result.failures:
        logger.warning(f"No images uploaded by {current_user.email}: {result.failures}")
    return result


# ==================== КАТЕГОРИИ ====================


@router.get("/catalogs/{catalog_id}/categories", response_model=List[Category])
def list_categories(
    catalog_id: str,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    _accessible_catalog(repository, current_user, catalog_id)
    return repository.list_categories(catalog_id)


@router.post(
    "/catalogs/{catalog_id}/categories",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    catalog_id: str,
    category_data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    _accessible_catalog(repository, current_user, catalog_id)
    return repository.create_category(catalog_id, category_data)


@router.put("/categories/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    category = repository.get_category(category_id)
    _accessible_catalog(repository, current_user, category.catalog_id)
    return repository.update_category(category_id, category_data)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    current_user: User = Depends(get_current_user),
    repository: CatalogRepository = Depends(get_repository),
):
    """Удаление категории (товары с этой категорией не изменяются)."""
    category = repository.get_category(category_id)
    _accessible_catalog(repository, current_user, category.catalog_id)
    repository.delete_category(category_id)


# ==================== КЛИЕНТЫ ====================


@router.get("/clients", response_model=List[Client])
def list_clients(
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    return repository.list_clients()


@router.post("/clients", response_model=Client, status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    return repository.create_client(client_data)


# ==================== ПОЛЬЗОВАТЕЛИ ====================


@router.get("/users", response_model=List[User])
def list_users(
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    return [user.public() for user in repository.list_users()]


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    """
    Создание нового пользователя.

    Пользователь с ролью client должен быть привязан к существующему клиенту.
    """
    if repository.find_user_by_email(user_data.email) is not None:
        raise ValidationFailure("A user with this email already exists")
    if user_data.role == "client":
        repository.get_client(user_data.client_id)

    hashed_password = auth_service.get_password_hash(user_data.password)
    return repository.create_user(user_data, hashed_password).public()


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    repository: CatalogRepository = Depends(get_repository),
):
    if user_id == current_user.id:
        raise ValidationFailure("You cannot delete your own account")
    repository.delete_user(user_id)
