"""
Демонстрационные данные для mock-режима.

Наполняют InMemoryCatalogRepository, когда хранилище не настроено,
чтобы приложение можно было запускать локально без внешних сервисов.
"""

from app.repositories.memory import InMemoryCatalogRepository

MOCK_PASSWORD = "admin123"

MOCK_CLIENTS = [
    {
        "id": "client-1",
        "name": "Cliente Demo",
        "email": "cliente@demo.com",
        "company": "Tienda Ejemplo S.A.",
        "status": "active",
    },
]

MOCK_CATALOGS = [
    {
        "id": "1",
        "name": "Tienda Ejemplo",
        "slug": "tienda-ejemplo",
        "client_id": "client-1",
        "description": "Catálogo de productos de ejemplo",
        "theme": {"primary_color": "#0ea5e9", "secondary_color": "#0369a1"},
    },
]

MOCK_PRODUCTS = [
    {
        "id": "1",
        "catalog_id": "1",
        "name": "Producto 1",
        "description": "Descripción del producto 1",
        "price": 99.99,
        "image": "https://via.placeholder.com/300",
        "category": "Categoría 1",
        "stock": 10,
        "sku": "PROD-001",
    },
    {
        "id": "2",
        "catalog_id": "1",
        "name": "Producto 2",
        "description": "Descripción del producto 2",
        "price": 149.99,
        "image": "https://via.placeholder.com/300",
        "category": "Categoría 2",
        "stock": 5,
        "sku": "PROD-002",
    },
]

MOCK_CATEGORIES = [
    {"id": "cat-1", "name": "Categoría 1", "color": "#0ea5e9", "catalog_id": "1"},
    {"id": "cat-2", "name": "Categoría 2", "color": "#f97316", "catalog_id": "1"},
]


def build_mock_repository() -> InMemoryCatalogRepository:
    """Создать репозиторий в памяти с демо-данными и демо-пользователями."""
    from app.core.auth import AuthService

    repository = InMemoryCatalogRepository()
    for client in MOCK_CLIENTS:
        repository.insert_document("clients", client)
    for catalog in MOCK_CATALOGS:
        repository.insert_document("catalogs", catalog)
    for product in MOCK_PRODUCTS:
        repository.insert_document("products", product)
    for category in MOCK_CATEGORIES:
        repository.insert_document("categories", category)

    hashed = AuthService.get_password_hash(MOCK_PASSWORD)
    repository.insert_document(
        "users",
        {
            "id": "mock-admin-uid",
            "email": "admin@webriders.com",
            "display_name": "Admin Webriders",
            "role": "admin",
            "hashed_password": hashed,
        },
    )
    repository.insert_document(
        "users",
        {
            "id": "mock-client-uid",
            "email": "cliente@demo.com",
            "display_name": "Cliente Demo",
            "role": "client",
            "client_id": "client-1",
            "hashed_password": hashed,
        },
    )
    return repository
