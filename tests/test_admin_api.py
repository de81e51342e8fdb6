"""
Тесты административного API: аутентификация, доступ клиентов, CRUD.
"""

from datetime import timedelta

import httpx
import pytest

from app.api.v1.endpoints.admin import get_batch_uploader
from app.core.auth import AuthService
from app.main import app
from app.services.image_upload import BatchUploader, CloudinaryUploader
from app.services.storage_service import AssetStorage, LocalStorageProvider, get_asset_storage
from tests.helpers import make_image

ADMIN = "/api/v1/admin"


class TestAuth:
    def test_login(self, client):
        response = client.post(
            f"{ADMIN}/auth/login",
            json={"email": "admin@webriders.com", "password": "admin123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["expiresIn"] == 480 * 60
        assert data["user"]["role"] == "admin"
        assert "hashedPassword" not in data["user"]

        me = client.get(
            f"{ADMIN}/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"}
        )
        assert me.json()["email"] == "admin@webriders.com"

    def test_wrong_password(self, client):
        response = client.post(
            f"{ADMIN}/auth/login",
            json={"email": "admin@webriders.com", "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Incorrect email or password"}

    def test_missing_token(self, client):
        response = client.get(f"{ADMIN}/auth/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token(self, client):
        response = client.get(f"{ADMIN}/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_expired_token(self, client, memory_repository):
        user = memory_repository.get_user("mock-admin-uid").public()
        token = AuthService.create_access_token(user, expires_delta=timedelta(seconds=-5))
        response = client.get(f"{ADMIN}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_deleted_user_is_signed_out(self, client, memory_repository, client_headers):
        memory_repository.delete_user("mock-client-uid")
        response = client.get(f"{ADMIN}/auth/me", headers=client_headers)
        assert response.status_code == 401
        assert response.json() == {"error": "User no longer exists"}

    def test_client_token_claims(self, memory_repository):
        user = memory_repository.get_user("mock-client-uid").public()
        payload = AuthService.verify_token(AuthService.create_access_token(user))
        assert payload["sub"] == "mock-client-uid"
        assert payload["role"] == "client"
        assert payload["client_id"] == "client-1"


class TestCatalogAccess:
    def _create(self, client, headers, **body):
        body.setdefault("clientId", "client-1")
        return client.post(f"{ADMIN}/catalogs", json=body, headers=headers)

    def test_admin_creates_catalog(self, client, admin_headers):
        response = self._create(client, admin_headers, name="Nueva Tienda")
        assert response.status_code == 201
        assert response.json()["slug"] == "nueva-tienda"

        public = client.get("/getCatalog", params={"slug": "nueva-tienda"})
        assert public.status_code == 200
        assert public.json()["products"] == []

    def test_empty_name_is_rejected(self, client, admin_headers):
        response = self._create(client, admin_headers, name="")
        assert response.status_code == 422
        assert list(response.json()) == ["error"]
        assert response.json()["error"].startswith("name: ")

    def test_duplicate_slug_conflict(self, client, admin_headers):
        response = self._create(client, admin_headers, name="Tienda Ejemplo")
        assert response.status_code == 409
        assert "tienda-ejemplo" in response.json()["error"]

    def test_unknown_client(self, client, admin_headers):
        response = self._create(client, admin_headers, name="X", clientId="ghost")
        assert response.status_code == 404

    def test_client_cannot_create(self, client, client_headers):
        response = self._create(client, client_headers, name="Mía")
        assert response.status_code == 403

    def test_client_sees_only_own_catalogs(self, client, admin_headers, client_headers, memory_repository):
        memory_repository.insert_document("clients", {"id": "client-2", "name": "Otro", "email": "otro@demo.com"})
        other = self._create(client, admin_headers, name="Ajena", clientId="client-2").json()

        admin_ids = [c["id"] for c in client.get(f"{ADMIN}/catalogs", headers=admin_headers).json()]
        client_ids = [c["id"] for c in client.get(f"{ADMIN}/catalogs", headers=client_headers).json()]
        assert set(admin_ids) == {"1", other["id"]}
        assert client_ids == ["1"]

        assert client.get(f"{ADMIN}/catalogs/{other['id']}", headers=client_headers).status_code == 403
        assert client.get(f"{ADMIN}/catalogs/1", headers=client_headers).status_code == 200

    def test_owner_updates_catalog(self, client, client_headers):
        response = client.put(
            f"{ADMIN}/catalogs/1",
            json={"description": "Nueva descripción", "theme": {"primaryColor": "#000000"}},
            headers=client_headers,
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Nueva descripción"
        assert response.json()["theme"]["primaryColor"] == "#000000"
        assert response.json()["slug"] == "tienda-ejemplo"

    def test_owner_cannot_reassign_catalog(self, client, client_headers):
        response = client.put(
            f"{ADMIN}/catalogs/1", json={"clientId": "client-2"}, headers=client_headers
        )
        assert response.status_code == 403

    def test_invalid_slug_update(self, client, admin_headers):
        response = client.put(f"{ADMIN}/catalogs/1", json={"slug": "Con Espacios"}, headers=admin_headers)
        assert response.status_code == 400

    def test_delete_cascades(self, client, admin_headers, client_headers, memory_repository):
        assert client.delete(f"{ADMIN}/catalogs/1", headers=client_headers).status_code == 403

        response = client.delete(f"{ADMIN}/catalogs/1", headers=admin_headers)
        assert response.status_code == 204
        assert memory_repository.list_all_products() == []
        assert client.get("/getCatalog", params={"slug": "tienda-ejemplo"}).status_code == 404

    def test_dashboard(self, client, client_headers):
        data = client.get(f"{ADMIN}/dashboard", headers=client_headers).json()
        assert data["totalCatalogs"] == 1
        assert data["totalClients"] == 1
        assert data["stats"]["totalValue"] == 249.98


class TestProductsAndCategories:
    def test_product_crud(self, client, client_headers):
        created = client.post(
            f"{ADMIN}/catalogs/1/products",
            json={"name": "Producto 3", "price": 10, "category": "Categoría 1", "stock": 0},
            headers=client_headers,
        )
        assert created.status_code == 201
        product_id = created.json()["id"]
        assert created.json()["catalogId"] == "1"

        updated = client.put(
            f"{ADMIN}/products/{product_id}", json={"stock": 4}, headers=client_headers
        )
        assert updated.json()["stock"] == 4
        assert updated.json()["price"] == 10

        listed = client.get(f"{ADMIN}/catalogs/1/products", headers=client_headers).json()
        assert len(listed) == 3

        assert client.delete(f"{ADMIN}/products/{product_id}", headers=client_headers).status_code == 204
        assert client.get(f"{ADMIN}/catalogs/1/products", headers=client_headers).json()[-1]["id"] == "2"

    def test_invalid_price_rejected(self, client, client_headers):
        response = client.post(
            f"{ADMIN}/catalogs/1/products", json={"name": "X", "price": -1}, headers=client_headers
        )
        assert response.status_code == 422

    def test_inline_images_size_limit(self, client, client_headers):
        huge = "data:image/jpeg;base64," + "A" * 1_300_000
        response = client.post(
            f"{ADMIN}/catalogs/1/products",
            json={"name": "Pesado", "image": huge},
            headers=client_headers,
        )
        assert response.status_code == 422
        assert "fewer images" in response.json()["error"]

        response = client.put(
            f"{ADMIN}/products/1", json={"images": [huge]}, headers=client_headers
        )
        assert response.status_code == 422

    def test_other_client_cannot_touch_products(self, client, memory_repository):
        memory_repository.insert_document(
            "users",
            {"id": "intruder", "email": "x@otro.com", "role": "client", "client_id": "client-2", "hashed_password": "h"},
        )
        user = memory_repository.get_user("intruder").public()
        headers = {"Authorization": f"Bearer {AuthService.create_access_token(user)}"}

        assert client.put(f"{ADMIN}/products/1", json={"price": 1}, headers=headers).status_code == 403
        assert client.get(f"{ADMIN}/catalogs/1/products", headers=headers).status_code == 403

    def test_category_crud(self, client, client_headers, memory_repository):
        created = client.post(
            f"{ADMIN}/catalogs/1/categories",
            json={"name": "Ofertas", "color": "#22c55e"},
            headers=client_headers,
        )
        assert created.status_code == 201
        category_id = created.json()["id"]

        names = [c["name"] for c in client.get(f"{ADMIN}/catalogs/1/categories", headers=client_headers).json()]
        assert names == ["Categoría 1", "Categoría 2", "Ofertas"]

        renamed = client.put(
            f"{ADMIN}/categories/{category_id}", json={"name": "Promos"}, headers=client_headers
        )
        assert renamed.json()["name"] == "Promos"

        assert client.delete(f"{ADMIN}/categories/cat-1", headers=client_headers).status_code == 204
        assert [p.category for p in memory_repository.list_products("1")] == ["Categoría 1", "Categoría 2"]

    def test_unknown_product(self, client, admin_headers):
        response = client.put(f"{ADMIN}/products/missing", json={"price": 1}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}


class TestUsersAndClients:
    def test_admin_only(self, client, client_headers):
        assert client.get(f"{ADMIN}/users", headers=client_headers).status_code == 403
        assert client.get(f"{ADMIN}/clients", headers=client_headers).status_code == 403

    def test_create_client_and_user(self, client, admin_headers):
        created = client.post(
            f"{ADMIN}/clients",
            json={"name": "Ferretería Sur", "email": "ventas@ferreteriasur.com"},
            headers=admin_headers,
        )
        assert created.status_code == 201
        client_id = created.json()["id"]
        assert created.json()["catalogIds"] == []

        user = client.post(
            f"{ADMIN}/users",
            json={"email": "dueno@ferreteriasur.com", "password": "secreto", "role": "client", "clientId": client_id},
            headers=admin_headers,
        )
        assert user.status_code == 201
        assert user.json()["clientId"] == client_id

        login = client.post(
            f"{ADMIN}/auth/login", json={"email": "dueno@ferreteriasur.com", "password": "secreto"}
        )
        assert login.status_code == 200
        assert login.json()["user"]["role"] == "client"

    def test_client_user_requires_client_id(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/users",
            json={"email": "nuevo@demo.com", "password": "secreto", "role": "client"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_duplicate_email(self, client, admin_headers):
        response = client.post(
            f"{ADMIN}/users",
            json={"email": "cliente@demo.com", "password": "secreto", "role": "client", "clientId": "client-1"},
            headers=admin_headers,
        )
        assert response.status_code == 422
        assert response.json() == {"error": "A user with this email already exists"}

    def test_delete_user(self, client, admin_headers):
        assert client.delete(f"{ADMIN}/users/mock-admin-uid", headers=admin_headers).status_code == 422
        assert client.delete(f"{ADMIN}/users/mock-client-uid", headers=admin_headers).status_code == 204
        emails = [u["email"] for u in client.get(f"{ADMIN}/users", headers=admin_headers).json()]
        assert emails == ["admin@webriders.com"]


class TestUploads:
    @pytest.fixture
    def storage(self, tmp_path):
        storage = AssetStorage(LocalStorageProvider(base_path=str(tmp_path), base_url="https://cdn.test"))
        app.dependency_overrides[get_asset_storage] = lambda: storage
        return storage

    def test_logo_upload(self, client, client_headers, storage, tmp_path):
        response = client.post(
            f"{ADMIN}/catalogs/1/logo",
            files={"file": ("logo.png", make_image(), "image/png")},
            headers=client_headers,
        )
        assert response.status_code == 200
        logo = response.json()["logo"]
        assert logo.startswith("https://cdn.test/catalogs/1/logo/")
        assert logo.endswith("_logo.png")
        assert len(list((tmp_path / "catalogs" / "1" / "logo").iterdir())) == 1

    def test_logo_too_large(self, client, client_headers, storage):
        response = client.post(
            f"{ADMIN}/catalogs/1/logo",
            files={"file": ("logo.png", b"0" * (2 * 1024 * 1024 + 1), "image/png")},
            headers=client_headers,
        )
        assert response.status_code == 422
        assert response.json() == {"error": "The logo must not exceed 2MB"}

    def test_logo_must_be_image(self, client, client_headers, storage):
        response = client.post(
            f"{ADMIN}/catalogs/1/logo",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=client_headers,
        )
        assert response.status_code == 422

    def test_product_image_appends_to_gallery(self, client, client_headers, storage):
        response = client.post(
            f"{ADMIN}/products/1/image",
            files={"file": ("foto.png", make_image(), "image/png")},
            headers=client_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["image"] == "https://via.placeholder.com/300"
        assert data["images"][0].startswith("https://cdn.test/catalogs/1/products/1/")

    def test_batch_upload_to_image_host(self, client, client_headers):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1_1/demo/image/upload"
            name = b"a.png" if b'filename="a.png"' in request.content else b"c.png"
            return httpx.Response(200, json={"secure_url": f"https://res.cloudinary.com/demo/{name.decode()}"})

        uploader = CloudinaryUploader(
            cloud_name="demo",
            upload_preset="preset",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        app.dependency_overrides[get_batch_uploader] = lambda: BatchUploader(uploader, delay=0)

        response = client.post(
            f"{ADMIN}/images/upload",
            files=[
                ("files", ("a.png", make_image(), "image/png")),
                ("files", ("b.txt", b"hello", "text/plain")),
                ("files", ("c.png", make_image(), "image/png")),
            ],
            headers=client_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["urls"] == [
            "https://res.cloudinary.com/demo/a.png",
            "https://res.cloudinary.com/demo/c.png",
        ]
        assert data["total"] == 3
        assert [f["filename"] for f in data["failures"]] == ["b.txt"]

    def test_upload_requires_auth(self, client):
        response = client.post(
            f"{ADMIN}/images/upload", files=[("files", ("a.png", make_image(), "image/png"))]
        )
        assert response.status_code == 401
