from __future__ import annotations

from catalog.core.config import Settings
from catalog.infrastructure.persistence_clients import MongoClientManager
from catalog.repositories.product_repository import ProductRepository
from catalog.repositories.user_repository import UserRepository
from catalog.services.auth_service import AuthService
from catalog.services.product_service import ProductService
from catalog.services.upload_service import UploadService
from catalog.store.in_memory import InMemoryStore

settings = Settings.from_env()
store = InMemoryStore()
mongo_manager = MongoClientManager(uri=settings.mongodb_uri, enabled=settings.enable_external_services)
mongo_manager.connect()

user_repository = UserRepository(store=store, mongo_manager=mongo_manager)
product_repository = ProductRepository(store=store, mongo_manager=mongo_manager)
upload_service = UploadService(
    uploads_dir=settings.uploads_dir,
    max_bytes=settings.upload_max_bytes,
)
auth_service = AuthService(settings=settings, user_repository=user_repository)
product_service = ProductService(
    store=store,
    settings=settings,
    product_repository=product_repository,
    upload_service=upload_service,
)
