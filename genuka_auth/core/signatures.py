# genuka_auth/core/signatures.py
"""HMAC-SHA256 helpers for Genuka callbacks and webhooks.

The callback message is the query string Genuka itself signs: keys sorted
lexicographically, pairs form-encoded with ``urlencode``. ``redirect_to``
arrives already percent-encoded and is encoded a second time here; Genuka
builds its signing input the same way, so this must not be "fixed".
"""
from __future__ import annotations

import hashlib
import hmac
import time
from typing import Mapping, Optional
from urllib.parse import quote_plus, urlencode

DEFAULT_MAX_AGE_SECONDS = 300


def _quote(value, safe="", encoding=None, errors=None) -> str:
    # Genuka codifica "~" como %7E; quote_plus o deixa literal
    return quote_plus(value, safe, encoding, errors).replace("~", "%7E")


def canonicalize(params: Mapping[str, str]) -> str:
    return urlencode(sorted(params.items(), key=lambda kv: kv[0]), quote_via=_quote)


def sign(params: Mapping[str, str], secret: str) -> str:
    return hmac.new(secret.encode(), canonicalize(params).encode(), hashlib.sha256).hexdigest()


def verify(params: Mapping[str, str], signature: Optional[str], secret: str) -> bool:
    """Constant-time check of ``signature`` against ``params``. Never raises."""
    if not signature or not secret:
        return False
    expected = sign(params, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())


def is_fresh(timestamp: int | str, now: Optional[float] = None, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> bool:
    try:
        ts = int(timestamp)
    except (TypeError, ValueError):
        return False
    current = int(time.time() if now is None else now)
    return abs(current - ts) <= max_age


# ---- webhooks: assinatura sobre o corpo cru ----
def sign_body(raw: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()


def verify_body(raw: bytes, signature: Optional[str], secret: str) -> bool:
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign_body(raw, secret).encode(), signature.encode())
