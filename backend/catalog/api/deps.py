from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from catalog.container import auth_service
from catalog.services.auth_service import AuthContext

logger = logging.getLogger(__name__)


def _extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1].strip()


def get_auth_context(request: Request) -> AuthContext:
    token = _extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    return auth_service.authenticate(token)


def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not context.is_admin:
        logger.warning("User %s attempted an admin-only product operation", context.user_id)
        raise HTTPException(status_code=403, detail="Admin role required")
    return context
