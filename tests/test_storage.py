"""
Тесты объектного хранилища логотипов и изображений товаров.
"""

import pytest
from botocore.exceptions import ClientError

from app.core.errors import UpstreamFailure, ValidationFailure
from app.services.storage_service import (
    MAX_PRODUCT_IMAGE_SIZE,
    AssetStorage,
    LocalStorageProvider,
    S3StorageProvider,
    StorageProvider,
)


class FakeS3Client:
    class meta:
        endpoint_url = "http://minio:9000"

    def __init__(self, fail=False):
        self.fail = fail
        self.objects = {}

    def put_object(self, Bucket, Key, Body, **kwargs):
        if self.fail:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[(Bucket, Key)] = (Body.read(), kwargs)


class TestLocalStorage:
    def test_logo_saved_under_catalog(self, tmp_path):
        storage = AssetStorage(LocalStorageProvider(base_path=str(tmp_path), base_url=""))
        url = storage.upload_catalog_logo("cat-1", "../logo.png", b"png", "image/png")

        assert url.startswith("/static/catalogs/cat-1/logo/")
        assert url.endswith("_logo.png")
        saved = list((tmp_path / "catalogs" / "cat-1" / "logo").iterdir())
        assert len(saved) == 1
        assert saved[0].read_bytes() == b"png"

    def test_product_image_limits(self, tmp_path):
        storage = AssetStorage(LocalStorageProvider(base_path=str(tmp_path), base_url=""))
        url = storage.upload_product_image("c", "p", "a.jpg", b"0" * (3 * 1024 * 1024), "image/jpeg")
        assert "/catalogs/c/products/p/" in url

        with pytest.raises(ValidationFailure) as exc_info:
            storage.upload_product_image("c", "p", "a.jpg", b"0" * (MAX_PRODUCT_IMAGE_SIZE + 1), "image/jpeg")
        assert exc_info.value.message == "The image must not exceed 5MB"

    def test_non_image_rejected(self, tmp_path):
        storage = AssetStorage(LocalStorageProvider(base_path=str(tmp_path)))
        with pytest.raises(ValidationFailure):
            storage.upload_catalog_logo("c", "a.txt", b"x", "text/plain")


class TestS3Storage:
    def test_put_object(self):
        s3 = FakeS3Client()
        provider = S3StorageProvider("assets", s3_client=s3)
        url = AssetStorage(provider).upload_catalog_logo("c", "logo.png", b"png", "image/png")

        ((bucket, key), (body, extra)) = next(iter(s3.objects.items()))
        assert bucket == "assets"
        assert key.startswith("catalogs/c/logo/")
        assert body == b"png"
        assert extra == {"ContentType": "image/png", "ContentLength": 3}
        assert url.endswith(key)

    def test_failure_becomes_upstream_error(self):
        storage = AssetStorage(S3StorageProvider("assets", s3_client=FakeS3Client(fail=True)))
        with pytest.raises(UpstreamFailure):
            storage.upload_catalog_logo("c", "logo.png", b"png", "image/png")


class TestProviderInterface:
    def test_provider_needs_only_save_and_url(self):
        class MemoryProvider(StorageProvider):
            def __init__(self):
                self.files = {}

            def save_file(self, file_path, file_data, content_type=None):
                self.files[file_path] = file_data.read()
                return True

            def get_file_url(self, file_path):
                return f"mem://{file_path}"

        provider = MemoryProvider()
        url = AssetStorage(provider).upload_catalog_logo("c", "logo.png", b"png", "image/png")
        assert url.startswith("mem://catalogs/c/logo/")
        assert list(provider.files.values()) == [b"png"]
