from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from catalog.api.deps import require_admin
from catalog.container import product_service
from catalog.models.query import ProductFilters
from catalog.models.schemas import ProductPatchRequest, ProductWriteRequest
from catalog.services.auth_service import AuthContext

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=201)
def create_product(
    name: str = Form(..., min_length=1, max_length=200),
    description: str = Form(default="", max_length=5000),
    price: float = Form(..., ge=0, allow_inf_nan=False),
    file: UploadFile | None = File(default=None),
    _: AuthContext = Depends(require_admin),
) -> dict[str, object]:
    product = product_service.create_product(
        ProductWriteRequest(name=name, description=description, price=price),
        file,
    )
    return {"message": "Product saved successfully", "product": product}


@router.get("/all")
def list_all_products(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
) -> list[dict[str, object]]:
    return product_service.list_all(page=product_service.page_from_query(page=page, limit=limit))


@router.get("")
def list_products(
    name: str | None = Query(default=None),
    description: str | None = Query(default=None),
    minPrice: str | None = Query(default=None),
    maxPrice: str | None = Query(default=None),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
) -> dict[str, object]:
    filters = ProductFilters.from_query(
        name=name,
        description=description,
        min_price=minPrice,
        max_price=maxPrice,
    )
    return product_service.list_products(
        filters=filters,
        page=product_service.page_from_query(page=page, limit=limit),
    )


@router.get("/{product_id}")
def get_product(product_id: str) -> dict[str, object]:
    return product_service.get_product(product_id)


async def _patch_from_form(request: Request) -> ProductPatchRequest:
    # Form() maps an empty string to the default, which would hide `description=""`.
    form = await request.form()
    submitted = {
        key: form[key]
        for key in ("name", "description", "price")
        if key in form and isinstance(form[key], str)
    }
    try:
        return ProductPatchRequest.model_validate(submitted)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


@router.put("/{product_id}")
def update_product(
    product_id: str,
    _: AuthContext = Depends(require_admin),
    patch: ProductPatchRequest = Depends(_patch_from_form),
    file: UploadFile | None = File(default=None),
) -> dict[str, object]:
    product = product_service.update_product(product_id, patch, file)
    return {"message": "Product updated successfully", "product": product}


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    _: AuthContext = Depends(require_admin),
) -> dict[str, object]:
    product_service.delete_product(product_id)
    return {"message": "Product deleted successfully"}
