from __future__ import annotations

from typing import Any

from pymongo import ASCENDING, DESCENDING

from catalog.infrastructure.persistence_clients import resolve_database

IndexSpec = tuple[list[tuple[str, int]], dict[str, Any]]


MONGO_INDEX_SPECS: dict[str, list[IndexSpec]] = {
    "users": [
        ([("userId", ASCENDING)], {"name": "users_user_id_unique", "unique": True}),
    ],
    "products": [
        ([("productId", ASCENDING)], {"name": "products_product_id_unique", "unique": True}),
        ([("name", ASCENDING)], {"name": "products_name_asc"}),
        ([("price", ASCENDING)], {"name": "products_price_asc"}),
        ([("updatedAt", DESCENDING)], {"name": "products_updated_desc"}),
    ],
}


def ensure_mongo_indexes(*, client: Any, database_name: str | None = None) -> dict[str, list[str]]:
    database = resolve_database(client, database_name)
    created: dict[str, list[str]] = {}
    for collection_name, specs in MONGO_INDEX_SPECS.items():
        collection = database[collection_name]
        names: list[str] = []
        for keys, options in specs:
            names.append(str(collection.create_index(keys, **options)))
        created[collection_name] = names
    return created
