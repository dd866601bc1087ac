from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

# Keeps `skip` well inside the int64 range MongoDB accepts.
MAX_PAGE = 1_000_000_000


def parse_price_bound(raw: str | None) -> float | None:
    """Return a finite float for ``raw`` or ``None`` when it is missing or unusable."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _positive_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(float(str(raw).strip()))
    except (ValueError, OverflowError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, count: int) -> int:
        return math.ceil(count / self.limit) if count > 0 else 0

    @classmethod
    def from_query(
        cls,
        *,
        page: str | None,
        limit: str | None,
        default_limit: int,
        max_limit: int,
    ) -> "Page":
        safe_page = min(MAX_PAGE, _positive_int(page, 1))
        safe_limit = min(max_limit, _positive_int(limit, default_limit))
        return cls(page=safe_page, limit=safe_limit)


@dataclass(frozen=True)
class ProductFilters:
    name: str | None = None
    description: str | None = None
    min_price: float | None = None
    max_price: float | None = None

    @classmethod
    def from_query(
        cls,
        *,
        name: str | None,
        description: str | None,
        min_price: str | None,
        max_price: str | None,
    ) -> "ProductFilters":
        return cls(
            name=name or None,
            description=description or None,
            min_price=parse_price_bound(min_price),
            max_price=parse_price_bound(max_price),
        )

    def to_mongo_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if self.name is not None:
            query["name"] = self.name
        if self.description is not None:
            query["description"] = self.description
        price: dict[str, float] = {}
        if self.min_price is not None:
            price["$gte"] = self.min_price
        if self.max_price is not None:
            price["$lte"] = self.max_price
        if price:
            query["price"] = price
        return query

    def matches(self, product: dict[str, Any]) -> bool:
        if self.name is not None and product.get("name") != self.name:
            return False
        if self.description is not None and product.get("description") != self.description:
            return False
        if self.min_price is None and self.max_price is None:
            return True
        price = product.get("price")
        if not isinstance(price, (int, float)) or isinstance(price, bool):
            return False
        if self.min_price is not None and price < self.min_price:
            return False
        if self.max_price is not None and price > self.max_price:
            return False
        return True
