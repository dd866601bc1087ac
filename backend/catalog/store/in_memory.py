from __future__ import annotations

from datetime import datetime, timezone
from threading import RLock
from typing import Any
from uuid import uuid4

SEED_ADMIN_USER_ID = "user_admin"


class InMemoryStore:
    def __init__(self) -> None:
        self.lock = RLock()
        self.users_by_id: dict[str, dict[str, Any]] = {}
        self.products_by_id: dict[str, dict[str, Any]] = {}
        self._seed_admin_user()

    @staticmethod
    def new_id(prefix: str) -> str:
        return f"{prefix}_{uuid4().hex[:12]}"

    @staticmethod
    def utc_now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def iso_now() -> str:
        return InMemoryStore.utc_now().isoformat()

    def reset(self) -> None:
        with self.lock:
            self.users_by_id.clear()
            self.products_by_id.clear()
            self._seed_admin_user()

    def _seed_admin_user(self) -> None:
        now = self.iso_now()
        self.users_by_id[SEED_ADMIN_USER_ID] = {
            "id": SEED_ADMIN_USER_ID,
            "email": "admin@example.com",
            "name": "Catalog Admin",
            "isAdmin": True,
            "createdAt": now,
            "updatedAt": now,
        }
