# genuka_auth/core/tokens.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError, ExpiredSignatureError
from genuka_auth.core.config import settings

logger = logging.getLogger(__name__)

ALGO = settings.ALGORITHM

SESSION = "session"
REFRESH = "refresh"

def _now() -> datetime:
    return datetime.now(timezone.utc)

def create_token(
    *,
    company_id: str,
    token_type: str,
    ttl_seconds: int,
    secret: str,
    now: Optional[datetime] = None,
) -> str:
    """JWT HS256 com sub=company_id e o discriminador ``type``."""
    issued = now or _now()
    payload: Dict[str, Any] = {
        "sub": company_id,
        "type": token_type,
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGO)

def create_session_token(company_id: str, secret: str, ttl_seconds: Optional[int] = None, now: Optional[datetime] = None) -> str:
    return create_token(
        company_id=company_id,
        token_type=SESSION,
        ttl_seconds=ttl_seconds or settings.SESSION_TTL_SECONDS,
        secret=secret,
        now=now,
    )

def create_refresh_token(company_id: str, secret: str, ttl_seconds: Optional[int] = None, now: Optional[datetime] = None) -> str:
    return create_token(
        company_id=company_id,
        token_type=REFRESH,
        ttl_seconds=ttl_seconds or settings.REFRESH_TTL_SECONDS,
        secret=secret,
        now=now,
    )

def decode_token(token: str, secret: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGO])
    except ExpiredSignatureError:
        # expected and frequent, not an error
        logger.debug("JWT expired")
        return None
    except JWTError as exc:
        logger.error("JWT verification failed: %s", exc)
        return None
    if not isinstance(payload, dict):
        return None
    return payload

def _decode_typed(token: str, secret: str, token_type: str) -> Optional[Dict[str, Any]]:
    payload = decode_token(token, secret)
    if not payload:
        return None
    if payload.get("type") != token_type:
        return None
    if not payload.get("sub"):
        return None
    return payload

def decode_session(token: str, secret: str) -> Optional[Dict[str, Any]]:
    return _decode_typed(token, secret, SESSION)

def decode_refresh(token: str, secret: str) -> Optional[Dict[str, Any]]:
    return _decode_typed(token, secret, REFRESH)
