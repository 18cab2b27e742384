# genuka_auth/core/crypto.py
from __future__ import annotations

import base64
import hashlib
from functools import lru_cache
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from genuka_auth.core.config import settings


class TokenCipher:
    """Reversible cipher for provider tokens stored in ``companies``.

    The Fernet key is derived from the process secret (``APP_KEY``). With
    ``enabled=False`` values pass through untouched.
    """

    def __init__(self, secret: str, enabled: bool = True):
        self.enabled = enabled
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())
        self._fernet = Fernet(key)

    def encrypt(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not self.enabled:
            return value
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not self.enabled:
            return value
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except InvalidToken as exc:
            raise ValueError("Stored token cannot be decrypted with the current APP_KEY") from exc


@lru_cache(maxsize=1)
def get_token_cipher() -> TokenCipher:
    return TokenCipher(settings.APP_KEY, enabled=settings.GENUKA_ENCRYPT_TOKENS)
