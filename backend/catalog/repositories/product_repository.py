from __future__ import annotations

from copy import deepcopy
from typing import Any

from pymongo import ASCENDING, ReturnDocument

from catalog.infrastructure.persistence_clients import MongoClientManager
from catalog.models.query import ProductFilters
from catalog.store.in_memory import InMemoryStore

_LIST_SORT = [("createdAt", ASCENDING), ("productId", ASCENDING)]


class ProductRepository:
    """Product documents in the ``products`` collection.

    When MongoDB is disabled the repository serves the same operations from the
    in-memory store, which keeps products in insertion order.
    """

    def __init__(self, *, store: InMemoryStore, mongo_manager: MongoClientManager) -> None:
        self.store = store
        self.mongo_manager = mongo_manager

    def get(self, product_id: str) -> dict[str, Any] | None:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                row = self.store.products_by_id.get(product_id)
                return deepcopy(row) if row is not None else None

        payload = collection.find_one({"productId": product_id})
        if not payload:
            return None
        return self._from_document(payload)

    def list_page(self, *, filters: ProductFilters | None, skip: int, limit: int) -> list[dict[str, Any]]:
        active = filters or ProductFilters()
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                rows = [row for row in self.store.products_by_id.values() if active.matches(row)]
                return [deepcopy(row) for row in rows[skip : skip + limit]]

        cursor = collection.find(active.to_mongo_query()).sort(_LIST_SORT).skip(skip).limit(limit)
        return [self._from_document(row) for row in cursor]

    def count(self, *, filters: ProductFilters | None) -> int:
        active = filters or ProductFilters()
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                return sum(1 for row in self.store.products_by_id.values() if active.matches(row))
        return int(collection.count_documents(active.to_mongo_query()))

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                self.store.products_by_id[str(payload["id"])] = deepcopy(payload)
            return deepcopy(payload)

        collection.insert_one({"productId": payload["id"], **deepcopy(payload)})
        return deepcopy(payload)

    def update(self, product_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                row = self.store.products_by_id.get(product_id)
                if row is None:
                    return None
                row.update(deepcopy(changes))
                return deepcopy(row)

        payload = collection.find_one_and_update(
            {"productId": product_id},
            {"$set": deepcopy(changes)},
            return_document=ReturnDocument.AFTER,
        )
        if not payload:
            return None
        return self._from_document(payload)

    def delete(self, product_id: str) -> dict[str, Any] | None:
        collection = self._mongo_collection()
        if collection is None:
            with self.store.lock:
                return self.store.products_by_id.pop(product_id, None)

        payload = collection.find_one_and_delete({"productId": product_id})
        if not payload:
            return None
        return self._from_document(payload)

    def _mongo_collection(self) -> Any | None:
        return self.mongo_manager.collection("products")

    @staticmethod
    def _from_document(document: dict[str, Any]) -> dict[str, Any]:
        row = dict(document)
        row.pop("_id", None)
        product_id = row.pop("productId", None)
        row.setdefault("id", product_id)
        return row
