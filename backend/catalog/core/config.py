from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    app_name: str = "Product Catalog API"
    api_prefix: str = "/v1"
    token_secret: str = "replace-with-strong-secret"
    token_algorithm: str = "HS256"
    access_token_ttl_seconds: int = 900
    cors_origins: str = "http://localhost:5173"
    mongodb_uri: str = "mongodb://localhost:27017/catalog"
    enable_external_services: bool = False
    uploads_dir: str = "uploads"
    upload_max_bytes: int = 5 * 1024 * 1024
    request_max_body_bytes: int = 10 * 1024 * 1024
    default_page_limit: int = 5
    max_page_limit: int = 100
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> list[str]:
        origins = [value.strip() for value in self.cors_origins.split(",")]
        return [value for value in origins if value]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            api_prefix=os.getenv("API_PREFIX", cls.api_prefix),
            token_secret=os.getenv("TOKEN_SECRET", cls.token_secret),
            token_algorithm=os.getenv("TOKEN_ALGORITHM", cls.token_algorithm),
            access_token_ttl_seconds=int(
                os.getenv("ACCESS_TOKEN_TTL_SECONDS", str(cls.access_token_ttl_seconds))
            ),
            cors_origins=os.getenv("CORS_ORIGINS", cls.cors_origins),
            mongodb_uri=os.getenv("MONGODB_URI", cls.mongodb_uri),
            enable_external_services=os.getenv("ENABLE_EXTERNAL_SERVICES", "false").lower()
            in {"1", "true", "yes"},
            uploads_dir=os.getenv("UPLOADS_DIR", cls.uploads_dir),
            upload_max_bytes=int(os.getenv("UPLOAD_MAX_BYTES", str(cls.upload_max_bytes))),
            request_max_body_bytes=int(
                os.getenv("REQUEST_MAX_BODY_BYTES", str(cls.request_max_body_bytes))
            ),
            default_page_limit=max(
                1, int(os.getenv("DEFAULT_PAGE_LIMIT", str(cls.default_page_limit)))
            ),
            max_page_limit=max(1, int(os.getenv("MAX_PAGE_LIMIT", str(cls.max_page_limit)))),
            log_level=str(os.getenv("LOG_LEVEL", cls.log_level)).strip().upper() or cls.log_level,
        )
