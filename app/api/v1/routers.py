"""
Основной роутер API v1.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import admin, catalogs, debug

# Создание основного роутера API v1
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(catalogs.router, prefix="/catalogs", tags=["catalogs"])
api_router.include_router(debug.router, prefix="/_debug", tags=["_debug"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
