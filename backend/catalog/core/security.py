from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

SUBJECT_DELIMITER = "|"


@dataclass(frozen=True)
class TokenIdentity:
    """Identity carried by an access token.

    Issuers pack the subject as ``<userId>|<extra>``; only ``user_id`` is used
    for lookups, ``qualifier`` is kept for logging and future use.
    """

    user_id: str
    qualifier: str | None = None


def create_token(
    *,
    subject: str,
    ttl_seconds: int,
    secret: str,
    algorithm: str = "HS256",
    extra_claims: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "userId": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(*, token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        raise ValueError(str(exc)) from exc
    if not isinstance(payload, dict):
        raise ValueError("Token payload must be an object")
    return payload


def identity_from_claims(payload: dict[str, Any]) -> TokenIdentity:
    raw_subject = payload.get("userId") or payload.get("sub")
    if not isinstance(raw_subject, str) or not raw_subject.strip():
        raise ValueError("Token is missing a subject")
    user_id, _, qualifier = raw_subject.strip().partition(SUBJECT_DELIMITER)
    user_id = user_id.strip()
    if not user_id:
        raise ValueError("Token subject has an empty user id")
    return TokenIdentity(user_id=user_id, qualifier=qualifier.strip() or None)
