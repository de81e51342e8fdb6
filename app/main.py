"""
Главный модуль FastAPI приложения Webriders Catalog API.

Содержит конфигурацию приложения, middleware и роутеры.
Без DATABASE_URL работает на демо-данных в памяти.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import Response

from app.api.functions import router as functions_router
from app.api.v1.routers import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.db.database import init_db

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware, отвечающий на успешный preflight статусом 204."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response

        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Webriders Catalog API",
    description="API мультиклиентской платформы каталогов товаров",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Настройка CORS middleware
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения и режим хранилища
    """
    return {
        "status": "ok",
        "service": "Webriders Catalog API",
        "version": "1.0.0",
        "mode": "mock" if settings.MOCK_MODE else "sql",
    }


# Подключение API роутеров
app.include_router(functions_router, tags=["functions"])
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """
    Событие запуска приложения.

    Создает таблицы хранилища, если оно настроено.
    """
    if settings.MOCK_MODE:
        logger.warning("Running in mock mode with demo data")
        return
    init_db()
    logger.info("Database tables are ready")
