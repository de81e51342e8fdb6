#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных
"""

import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.database import get_engine, init_db


def init_database() -> bool:
    """Создает все таблицы в базе данных."""
    if settings.MOCK_MODE:
        print("❌ DATABASE_URL не задан, инициализировать нечего")
        return False

    print("🗄️ Инициализация базы данных...")
    try:
        init_db()
    except SQLAlchemyError as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False

    tables = inspect(get_engine()).get_table_names()
    print(f"✅ Таблиц в базе: {len(tables)}")
    for table in tables:
        print(f"  - {table}")
    return True


if __name__ == "__main__":
    if not init_database():
        sys.exit(1)
