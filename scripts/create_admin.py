#!/usr/bin/env python3
"""
Скрипт для создания администратора платформы.
"""

import argparse
import sys
from pathlib import Path

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.auth import AuthService
from app.core.config import settings
from app.core.errors import CatalogError
from app.db.database import SessionLocal, get_engine, init_db
from app.repositories.sql import SqlCatalogRepository
from app.schemas.admin import UserCreate


def create_admin(email: str, password: str, display_name: str) -> bool:
    """Создает администратора, если пользователя с таким email еще нет."""
    print("🔑 Создание администратора...")
    print("=" * 50)

    if settings.MOCK_MODE:
        print("❌ DATABASE_URL не задан. В mock-режиме используется admin@webriders.com")
        return False

    init_db()
    with SessionLocal(bind=get_engine()) as db:
        repository = SqlCatalogRepository(db)
        try:
            existing = repository.find_user_by_email(email)
            if existing is not None:
                print("✅ Пользователь уже существует:")
                print(f"   Email: {existing.email}")
                print(f"   ID: {existing.id}")
                print(f"   Роль: {existing.role}")
                return existing.role == "admin"

            user = repository.create_user(
                UserCreate(email=email, password=password, display_name=display_name, role="admin"),
                AuthService.get_password_hash(password),
            )
        except CatalogError as e:
            print(f"❌ Ошибка при создании администратора: {e.message}")
            return False

    print("✅ Администратор создан успешно!")
    print(f"   Email: {user.email}")
    print(f"   ID: {user.id}")
    print("=" * 50)
    print("📝 Смените пароль после первого входа!")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Создание администратора")
    parser.add_argument("--email", default="admin@webriders.com")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--name", default="Admin Webriders")
    args = parser.parse_args()

    if not create_admin(args.email, args.password, args.name):
        sys.exit(1)
