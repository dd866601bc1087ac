from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from catalog import container

_UPLOAD = {"file": ("photo.png", b"image-bytes", "image/png")}
_FIELDS = {"name": "A", "description": "B", "price": "5"}


def _seed_product(product_id: str = "prod_guarded") -> str:
    container.product_repository.create(
        {
            "id": product_id,
            "name": "Guarded",
            "description": "kept",
            "price": 12.0,
            "image": "/tmp/guarded.png",
            "imageName": "guarded.png",
            "createdAt": "2026-01-01T00:00:00+00:00",
            "updatedAt": "2026-01-01T00:00:00+00:00",
        }
    )
    return product_id


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("post", "/v1/products"),
        ("put", "/v1/products/prod_guarded"),
        ("delete", "/v1/products/prod_guarded"),
    ],
)
def test_protected_routes_require_bearer_token(client: TestClient, method: str, path: str) -> None:
    _seed_product()
    response = client.request(method.upper(), path)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_REQUIRED"
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert container.product_repository.get("prod_guarded") is not None


def test_malformed_authorization_header_is_rejected(client: TestClient) -> None:
    _seed_product()
    response = client.delete("/v1/products/prod_guarded", headers={"Authorization": "Token abc"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid Authorization header"


def test_token_signed_with_other_secret_is_rejected(
    client: TestClient,
    bearer_for: Callable[..., dict[str, str]],
) -> None:
    _seed_product()
    headers = bearer_for("user_admin", secret="not-the-server-secret")
    response = client.delete("/v1/products/prod_guarded", headers=headers)
    assert response.status_code == 401
    assert container.product_repository.get("prod_guarded") is not None


def test_expired_token_is_rejected(client: TestClient, bearer_for: Callable[..., dict[str, str]]) -> None:
    _seed_product()
    headers = bearer_for("user_admin", ttl_seconds=-60)
    response = client.delete("/v1/products/prod_guarded", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid access token"


def test_token_for_unknown_user_is_rejected(client: TestClient, bearer_for: Callable[..., dict[str, str]]) -> None:
    _seed_product()
    response = client.delete("/v1/products/prod_guarded", headers=bearer_for("user_ghost"))
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "User not found"


def test_non_admin_create_is_forbidden_without_writing_file(
    client: TestClient,
    customer_headers: dict[str, str],
    reset_state: Path,
) -> None:
    response = client.post("/v1/products", headers=customer_headers, data=_FIELDS, files=_UPLOAD)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"
    assert not reset_state.exists()
    assert container.product_repository.count(filters=None) == 0


def test_non_admin_update_is_forbidden_and_leaves_record_unchanged(
    client: TestClient,
    customer_headers: dict[str, str],
    reset_state: Path,
) -> None:
    product_id = _seed_product()
    response = client.put(
        f"/v1/products/{product_id}",
        headers=customer_headers,
        data={"name": "Hijacked", "price": "0"},
        files=_UPLOAD,
    )
    assert response.status_code == 403
    stored = container.product_repository.get(product_id)
    assert stored is not None
    assert stored["name"] == "Guarded"
    assert stored["price"] == 12.0
    assert not reset_state.exists()


def test_non_admin_delete_is_forbidden_and_record_survives(
    client: TestClient,
    customer_headers: dict[str, str],
) -> None:
    product_id = _seed_product()
    response = client.delete(f"/v1/products/{product_id}", headers=customer_headers)
    assert response.status_code == 403
    assert client.get(f"/v1/products/{product_id}").status_code == 200


def test_non_admin_delete_of_missing_product_is_forbidden(
    client: TestClient,
    customer_headers: dict[str, str],
) -> None:
    response = client.delete("/v1/products/prod_missing", headers=customer_headers)
    assert response.status_code == 403


def test_read_routes_do_not_require_authentication(client: TestClient) -> None:
    product_id = _seed_product()
    assert client.get("/v1/products").status_code == 200
    assert client.get("/v1/products/all").status_code == 200
    assert client.get(f"/v1/products/{product_id}").status_code == 200
