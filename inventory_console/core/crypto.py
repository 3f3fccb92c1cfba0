"""Симметричное шифрование значений, которые хранятся в localStorage."""

import base64
import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class TokenCipher:
    """
    Шифрует строки общим ключом, встроенным в клиент.

    Ключ известен любому, у кого есть код консоли, так что это обфускация,
    а не защита токена.
    """

    def __init__(self, secret_key: str) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        digest = hashlib.sha256(secret_key.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str) -> Optional[str]:
        """Возвращает None, если значение повреждено или зашифровано другим ключом."""
        try:
            return self._fernet.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            logger.warning(f"Failed to decrypt stored value: {type(e).__name__}")
            return None
