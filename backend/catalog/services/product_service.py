from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, UploadFile
from pymongo.errors import PyMongoError

from catalog.core.config import Settings
from catalog.models.query import Page, ProductFilters
from catalog.models.schemas import ProductPatchRequest, ProductWriteRequest
from catalog.repositories.product_repository import ProductRepository
from catalog.services.upload_service import StoredFile, UploadService
from catalog.store.in_memory import InMemoryStore

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(
        self,
        *,
        store: InMemoryStore,
        settings: Settings,
        product_repository: ProductRepository,
        upload_service: UploadService,
    ) -> None:
        self.store = store
        self.settings = settings
        self.product_repository = product_repository
        self.upload_service = upload_service

    def page_from_query(self, *, page: str | None, limit: str | None) -> Page:
        return Page.from_query(
            page=page,
            limit=limit,
            default_limit=self.settings.default_page_limit,
            max_limit=self.settings.max_page_limit,
        )

    def list_all(self, *, page: Page) -> list[dict[str, Any]]:
        try:
            return self.product_repository.list_page(filters=None, skip=page.skip, limit=page.limit)
        except PyMongoError as exc:
            logger.exception("Listing products failed")
            raise HTTPException(status_code=500, detail="Error retrieving products") from exc

    def list_products(self, *, filters: ProductFilters, page: Page) -> dict[str, Any]:
        try:
            products = self.product_repository.list_page(
                filters=filters,
                skip=page.skip,
                limit=page.limit,
            )
            count = self.product_repository.count(filters=filters)
        except PyMongoError as exc:
            logger.exception("Filtered product listing failed")
            raise HTTPException(status_code=500, detail="Error retrieving products") from exc
        return {
            "products": products,
            "count": count,
            "totalPages": page.total_pages(count),
        }

    def get_product(self, product_id: str) -> dict[str, Any]:
        try:
            product = self.product_repository.get(product_id)
        except PyMongoError as exc:
            logger.exception("Fetching product %s failed", product_id)
            raise HTTPException(status_code=500, detail="Error retrieving product") from exc
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def create_product(self, payload: ProductWriteRequest, upload: UploadFile | None) -> dict[str, Any]:
        if upload is None or not upload.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")

        stored = self._store_upload(upload)
        now = self.store.iso_now()
        product = {
            "id": self.store.new_id("prod"),
            "name": payload.name,
            "description": payload.description,
            "price": float(payload.price),
            "image": stored.path,
            "imageName": stored.original_name,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            created = self.product_repository.create(product)
        except PyMongoError as exc:
            logger.exception("Saving product %s failed", product["id"])
            self.upload_service.discard(stored.path)
            raise HTTPException(status_code=500, detail="Error saving product") from exc
        logger.info("Created product %s", created["id"])
        return created

    def update_product(
        self,
        product_id: str,
        patch: ProductPatchRequest,
        upload: UploadFile | None,
    ) -> dict[str, Any]:
        existing = self.get_product(product_id)

        changes: dict[str, Any] = patch.model_dump(exclude_none=True)
        if "price" in changes:
            changes["price"] = float(changes["price"])
        stored = None
        if upload is not None and upload.filename:
            stored = self._store_upload(upload)
            changes["image"] = stored.path
            changes["imageName"] = stored.original_name
        changes["updatedAt"] = self.store.iso_now()

        try:
            updated = self.product_repository.update(product_id, changes)
        except PyMongoError as exc:
            logger.exception("Updating product %s failed", product_id)
            if stored is not None:
                self.upload_service.discard(stored.path)
            raise HTTPException(status_code=500, detail="Error updating product") from exc
        if updated is None:
            if stored is not None:
                self.upload_service.discard(stored.path)
            raise HTTPException(status_code=404, detail="Product not found")

        if stored is not None and existing.get("image") != updated.get("image"):
            self.upload_service.discard(existing.get("image"))
        logger.info("Updated product %s", product_id)
        return updated

    def delete_product(self, product_id: str) -> None:
        try:
            deleted = self.product_repository.delete(product_id)
        except PyMongoError as exc:
            logger.exception("Deleting product %s failed", product_id)
            raise HTTPException(status_code=500, detail="Error deleting product") from exc
        if deleted is None:
            raise HTTPException(status_code=404, detail="Product not found")
        self.upload_service.discard(deleted.get("image"))
        logger.info("Deleted product %s", product_id)

    def _store_upload(self, upload: UploadFile) -> StoredFile:
        try:
            return self.upload_service.save(upload)
        except OSError as exc:
            logger.exception("Writing upload failed")
            raise HTTPException(status_code=500, detail="Error storing uploaded file") from exc
