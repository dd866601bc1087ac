from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException
from pymongo.errors import PyMongoError

from catalog.core.config import Settings
from catalog.core.security import decode_token, identity_from_claims
from catalog.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    is_admin: bool


class AuthService:
    def __init__(self, *, settings: Settings, user_repository: UserRepository) -> None:
        self.settings = settings
        self.user_repository = user_repository

    def authenticate(self, access_token: str) -> AuthContext:
        try:
            payload = decode_token(
                token=access_token,
                secret=self.settings.token_secret,
                algorithm=self.settings.token_algorithm,
            )
            identity = identity_from_claims(payload)
        except ValueError as exc:
            logger.warning("Rejected access token: %s", exc)
            raise HTTPException(status_code=401, detail="Invalid access token") from exc

        try:
            user = self.user_repository.get_user_by_id(identity.user_id)
        except PyMongoError as exc:
            logger.exception("User lookup failed for %s", identity.user_id)
            raise HTTPException(status_code=500, detail="Error resolving user") from exc
        if not user:
            logger.warning("Access token references unknown user %s", identity.user_id)
            raise HTTPException(status_code=401, detail="User not found")
        return AuthContext(user_id=identity.user_id, is_admin=bool(user.get("isAdmin", False)))
