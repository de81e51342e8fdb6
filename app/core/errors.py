"""
Иерархия ошибок приложения и их преобразование в HTTP ответы.

Каждая ошибка несет HTTP статус и сообщение, пригодное для показа
пользователю. Обработчик возвращает тело вида {"error": "..."}.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Базовая ошибка приложения."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(CatalogError):
    """Отсутствует или некорректен обязательный параметр."""

    status_code = 400
    default_message = "Invalid input"


class Unauthorized(CatalogError):
    """Сессия недействительна, клиент должен выполнить повторный вход."""

    status_code = 401
    default_message = "Could not validate credentials"


class PermissionDenied(CatalogError):
    status_code = 403
    default_message = "Not enough permissions"


class NotFound(CatalogError):
    status_code = 404
    default_message = "Not found"


class ValidationFailure(CatalogError):
    """Нарушены ограничения данных (размеры, лимиты, уникальность)."""

    status_code = 422
    default_message = "Validation failed"


class DuplicateSlug(ValidationFailure):
    status_code = 409
    default_message = "Slug is already in use"


class UpstreamFailure(CatalogError):
    """
    Внешний сервис (хранилище, хостинг изображений) недоступен или вернул ошибку.

    Пользователю показывается общее сообщение, подробности только в логах.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Преобразовать ошибку приложения в JSON ответ."""
    if isinstance(exc, UpstreamFailure):
        logger.error(f"Upstream failure on {request.url.path}: {exc.detail or exc.message}")

    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Ошибка валидации запроса в том же формате {"error": "..."}."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first['msg']}" if field else first["msg"]
    return JSONResponse(status_code=422, content={"error": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": CatalogError.default_message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
