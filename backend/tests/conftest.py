from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from catalog import container
from catalog.core.security import create_token
from catalog.main import app

CUSTOMER_USER_ID = "user_customer"


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path) -> Iterator[Path]:
    uploads_dir = tmp_path / "uploads"
    original_dir = container.upload_service.uploads_dir
    original_max = container.upload_service.max_bytes
    container.store.reset()
    container.upload_service.uploads_dir = uploads_dir
    container.user_repository.upsert_user(
        {
            "id": CUSTOMER_USER_ID,
            "email": "customer@example.com",
            "name": "Customer",
            "isAdmin": False,
        }
    )
    yield uploads_dir
    container.upload_service.uploads_dir = original_dir
    container.upload_service.max_bytes = original_max
    container.store.reset()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _bearer_for(user_id: str, *, extra: str = "session", ttl_seconds: int = 300, secret: str | None = None) -> dict[str, str]:
    token = create_token(
        subject=f"{user_id}|{extra}",
        ttl_seconds=ttl_seconds,
        secret=secret or container.settings.token_secret,
        algorithm=container.settings.token_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _bearer_for("user_admin")


@pytest.fixture
def customer_headers() -> dict[str, str]:
    return _bearer_for(CUSTOMER_USER_ID)


@pytest.fixture
def bearer_for() -> Callable[..., dict[str, str]]:
    return _bearer_for
