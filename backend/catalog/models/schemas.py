from __future__ import annotations

from pydantic import BaseModel, Field


class ProductWriteRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    price: float = Field(ge=0, allow_inf_nan=False)


class ProductPatchRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
