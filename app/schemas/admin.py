"""
Pydantic схемы для административной панели.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from app.schemas.common import CamelModel, as_utc

UserRole = Literal["admin", "client"]

# ==================== ПОЛЬЗОВАТЕЛИ ====================


class UserCreate(CamelModel):
    """Схема для создания пользователя."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = Field(None, max_length=255)
    role: UserRole = "client"
    client_id: Optional[str] = None

    @model_validator(mode="after")
    def _client_requires_client_id(self) -> "UserCreate":
        if self.role == "client" and not self.client_id:
            raise ValueError("client_id is required for users with role 'client'")
        return self


class User(CamelModel):
    """Схема для вывода пользователя."""

    id: str
    email: str
    display_name: Optional[str] = None
    role: UserRole
    client_id: Optional[str] = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def is_admin(self) -> bool:
        return self.role == "admin"


class UserInDB(User):
    """Пользователь вместе с хешем пароля (только внутри приложения)."""

    hashed_password: str

    def public(self) -> User:
        return User.model_validate(self.model_dump(exclude={"hashed_password"}))


# ==================== КЛИЕНТЫ ====================


class ClientCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=32)
    company: Optional[str] = None
    status: Literal["active", "inactive"] = "active"


class Client(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    status: Literal["active", "inactive"] = "active"
    catalog_ids: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


# ==================== АУТЕНТИФИКАЦИЯ ====================


class LoginRequest(CamelModel):
    """Схема для входа в систему."""

    email: str = Field(..., description="Email пользователя")
    password: str = Field(..., description="Пароль")


class LoginResponse(CamelModel):
    """Схема ответа при входе в систему."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User
