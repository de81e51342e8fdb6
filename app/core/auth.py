"""
Модуль аутентификации и авторизации.

Содержит функции для работы с JWT токенами, хеширования паролей
и проверки прав доступа пользователей к каталогам.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from app.core.config import settings
from app.core.errors import NotFound, PermissionDenied, Unauthorized
from app.repositories.base import CatalogRepository
from app.repositories.provider import get_repository
from app.schemas.admin import User
from app.schemas.catalog import Catalog

# Настройка хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT настройки
ALGORITHM = "HS256"

# HTTP Bearer схема (ошибку отсутствия токена формируем сами)
security = HTTPBearer(auto_error=False)


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Проверка пароля."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Хеширование пароля."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
        """Создание JWT токена для пользователя."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        to_encode = {
            "sub": user.id,
            "role": user.role,
            "client_id": user.client_id,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Проверка JWT токена."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return None

    def authenticate(
        self, repository: CatalogRepository, email: str, password: str
    ) -> Optional[User]:
        """Найти пользователя по email и проверить пароль."""
        user = repository.find_user_by_email(email)
        if user is None or not self.verify_password(password, user.hashed_password):
            return None
        return user.public()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repository: CatalogRepository = Depends(get_repository),
) -> User:
    """
    Получение текущего пользователя из токена.

    Если токен недействителен или пользователь удален, клиент
    должен выполнить повторный вход (401).
    """
    if credentials is None:
        raise Unauthorized("Not authenticated")

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise Unauthorized()

    try:
        user = repository.get_user(payload["sub"])
    except NotFound:
        raise Unauthorized("User no longer exists")
    return user.public()


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Проверка прав администратора."""
    if not current_user.is_admin():
        raise PermissionDenied()
    return current_user


def ensure_catalog_access(user: User, catalog: Catalog) -> None:
    """Клиент видит только каталоги своего client_id, администратор все."""
    if user.is_admin():
        return
    if not user.client_id or catalog.client_id != user.client_id:
        raise PermissionDenied("You do not have access to this catalog")


# Экспорт сервиса
auth_service = AuthService()
