from __future__ import annotations

import argparse
import json
import time
from typing import Any

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from catalog.core.config import Settings
from catalog.core.security import create_token
from catalog.infrastructure.mongo_indexes import ensure_mongo_indexes
from catalog.infrastructure.persistence_clients import resolve_database
from catalog.store.in_memory import InMemoryStore


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bootstrap MongoDB indexes and the seed admin user for the catalog.")
    parser.add_argument("--mongo-uri", default=None, help="MongoDB connection URI (defaults to MONGODB_URI env).")
    parser.add_argument("--database", default=None, help="Mongo database name override.")
    parser.add_argument("--retries", type=int, default=12, help="Retry attempts if Mongo is not ready.")
    parser.add_argument("--retry-delay", type=float, default=2.0, help="Delay in seconds between retries.")
    parser.add_argument("--timeout-ms", type=int, default=2500, help="Mongo server selection timeout (ms).")
    parser.add_argument(
        "--issue-admin-token",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Print an access token for the seed admin user.",
    )
    return parser


def _connect_with_retry(*, uri: str, retries: int, retry_delay: float, timeout_ms: int) -> MongoClient:
    attempts = max(1, retries)
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        try:
            client.admin.command("ping")
            return client
        except PyMongoError as exc:
            last_error = exc
            client.close()
            if attempt < attempts:
                time.sleep(retry_delay)
    raise RuntimeError(f"MongoDB not reachable after {attempts} attempts: {last_error}")


def _upsert_map(*, collection: Any, key_field: str, rows: dict[str, dict[str, Any]]) -> int:
    count = 0
    for row in rows.values():
        if not isinstance(row, dict):
            continue
        key_value = row.get(key_field) or row.get("id")
        if not key_value:
            continue
        payload = dict(row)
        payload[key_field] = key_value
        collection.update_one({key_field: key_value}, {"$set": payload}, upsert=True)
        count += 1
    return count


def run(
    *,
    mongo_uri: str | None,
    database: str | None,
    retries: int,
    retry_delay: float,
    timeout_ms: int,
    issue_admin_token: bool,
    settings: Settings | None = None,
) -> dict[str, Any]:
    settings = settings or Settings.from_env()
    uri = mongo_uri or settings.mongodb_uri
    store = InMemoryStore()
    client = _connect_with_retry(
        uri=uri,
        retries=retries,
        retry_delay=retry_delay,
        timeout_ms=timeout_ms,
    )
    try:
        created_indexes = ensure_mongo_indexes(client=client, database_name=database)
        db = resolve_database(client, database)
        seeded = {
            "users": _upsert_map(collection=db["users"], key_field="userId", rows=store.users_by_id),
        }
    finally:
        client.close()

    summary: dict[str, Any] = {
        "mongoUri": uri,
        "database": database or "default-from-uri-or-catalog",
        "seeded": seeded,
        "collections": len(created_indexes),
        "indexes": created_indexes,
    }
    if issue_admin_token:
        admin = next(row for row in store.users_by_id.values() if row.get("isAdmin"))
        summary["adminToken"] = create_token(
            subject=f"{admin['id']}|{admin['email']}",
            ttl_seconds=settings.access_token_ttl_seconds,
            secret=settings.token_secret,
            algorithm=settings.token_algorithm,
        )
    return summary


def main() -> int:
    args = _parser().parse_args()
    summary = run(
        mongo_uri=args.mongo_uri,
        database=args.database,
        retries=args.retries,
        retry_delay=args.retry_delay,
        timeout_ms=args.timeout_ms,
        issue_admin_token=args.issue_admin_token,
    )
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
