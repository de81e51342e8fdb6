"""
Общие зависимости FastAPI.
"""

from fastapi import Depends

from app.repositories.base import CatalogRepository
from app.repositories.provider import get_mock_repository, get_repository
from app.services.catalog_resolver import CatalogResolver

__all__ = ["get_mock_repository", "get_repository", "get_resolver"]


def get_resolver(repository: CatalogRepository = Depends(get_repository)) -> CatalogResolver:
    return CatalogResolver(repository)
