from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, PyMongoError, ServerSelectionTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "catalog"


@dataclass
class MongoClientManager:
    uri: str
    enabled: bool
    _client: Any = None
    _last_error: str | None = None

    def connect(self) -> None:
        if not self.enabled:
            return
        try:
            self._client = MongoClient(self.uri, serverSelectionTimeoutMS=2000)
            self._client.admin.command("ping")
            self._last_error = None
        except PyMongoError as exc:
            logger.warning("MongoDB unavailable: %s", exc)
            if self._client is not None:
                self._client.close()
            self._client = None
            self._last_error = str(exc)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None

    @property
    def status(self) -> str:
        if not self.enabled:
            return "disabled"
        if self._client is None:
            return "unavailable"
        return "connected"

    @property
    def error(self) -> str | None:
        return self._last_error

    @property
    def client(self) -> Any:
        return self._client

    def collection(self, name: str) -> Any | None:
        """Return the named collection, or ``None`` when MongoDB is disabled.

        An enabled but unreachable database never falls back to the in-memory
        store: a reconnect is attempted and a ``PyMongoError`` is raised if it
        still fails.
        """
        if not self.enabled:
            return None
        if self._client is None:
            self.connect()
        if self._client is None:
            raise ServerSelectionTimeoutError(self._last_error or "MongoDB is not connected")
        return resolve_database(self._client)[name]


def resolve_database(client: Any, database_name: str | None = None) -> Any:
    if database_name:
        return client[database_name]
    try:
        default_database = client.get_default_database()
    except ConfigurationError:
        default_database = None
    if default_database is not None:
        return default_database
    return client[DEFAULT_DATABASE_NAME]
