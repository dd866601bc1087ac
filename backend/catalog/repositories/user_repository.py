from __future__ import annotations

from copy import deepcopy
from typing import Any

from catalog.infrastructure.persistence_clients import MongoClientManager
from catalog.store.in_memory import InMemoryStore


class UserRepository:
    def __init__(self, *, store: InMemoryStore, mongo_manager: MongoClientManager) -> None:
        self.store = store
        self.mongo_manager = mongo_manager

    def get_user_by_id(self, user_id: str) -> dict[str, Any] | None:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                row = self.store.users_by_id.get(user_id)
                return deepcopy(row) if row is not None else None

        payload = collection.find_one({"userId": user_id})
        if not payload:
            return None
        return self._from_document(payload)

    def upsert_user(self, payload: dict[str, Any]) -> dict[str, Any]:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                self.store.users_by_id[str(payload["id"])] = deepcopy(payload)
            return deepcopy(payload)

        collection.update_one(
            {"userId": payload["id"]},
            {"$set": {"userId": payload["id"], **deepcopy(payload)}},
            upsert=True,
        )
        return deepcopy(payload)

    def _mongo_collection(self) -> Any | None:
        return self.mongo_manager.collection("users")

    @staticmethod
    def _from_document(document: dict[str, Any]) -> dict[str, Any]:
        row = dict(document)
        row.pop("_id", None)
        user_id = row.pop("userId", None)
        row.setdefault("id", user_id)
        row["isAdmin"] = bool(row.get("isAdmin", False))
        return row
