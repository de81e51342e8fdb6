"""
Общие фикстуры тестов.

По умолчанию приложение работает на репозитории в памяти с демо-данными;
SQL репозиторий проверяется на SQLite в памяти.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_repository
from app.core.auth import auth_service
from app.db.models import Base
from app.main import app
from app.repositories.memory import InMemoryCatalogRepository
from app.repositories.mock_data import build_mock_repository
from app.repositories.sql import SqlCatalogRepository


@pytest.fixture(scope="session")
def _seeded_repository() -> InMemoryCatalogRepository:
    return build_mock_repository()


@pytest.fixture
def memory_repository(_seeded_repository) -> InMemoryCatalogRepository:
    """Свежая копия демо-репозитория (bcrypt хеш считается один раз)."""
    repository = InMemoryCatalogRepository()
    for collection, documents in _seeded_repository._collections.items():
        for document in documents.values():
            repository.insert_document(collection, document)
    return repository


@pytest.fixture
def sql_repository():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield SqlCatalogRepository(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Обе реализации репозитория с одинаковыми исходными данными."""
    if request.param == "memory":
        return InMemoryCatalogRepository()
    return request.getfixturevalue("sql_repository")


@pytest.fixture
def client(memory_repository):
    app.dependency_overrides[get_repository] = lambda: memory_repository
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _bearer(repository, user_id: str) -> dict:
    user = repository.get_user(user_id).public()
    return {"Authorization": f"Bearer {auth_service.create_access_token(user)}"}


@pytest.fixture
def admin_headers(memory_repository) -> dict:
    return _bearer(memory_repository, "mock-admin-uid")


@pytest.fixture
def client_headers(memory_repository) -> dict:
    return _bearer(memory_repository, "mock-client-uid")
