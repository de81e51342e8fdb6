"""
Общие элементы Pydantic схем.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Базовая схема: snake_case в Python, camelCase в JSON.

    Принимает данные как по имени поля, так и по алиасу, а также
    напрямую из ORM объектов.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def as_utc(value: datetime) -> datetime:
    """Привести временную метку хранилища к aware-datetime в UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
