"""Token repository - persistence for the Cafe24 OAuth token pair"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.orm import Session

from ...models import TOKEN_STORE_KEY, Cafe24Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    updated_at: Optional[datetime] = None


class TokenRepository:
    """
    Reads and upserts the singleton token row.

    When an encryption key is configured, tokens are stored Fernet-encrypted.
    A row that cannot be decrypted (key rotated, or written before encryption
    was enabled) is read as plaintext so an existing deployment keeps working.
    """

    def __init__(self, session_factory: Callable[[], Session], encryption_key: Optional[str] = None):
        self.session_factory = session_factory
        self.cipher_suite = Fernet(encryption_key.encode()) if encryption_key else None

    def _encrypt(self, token: str) -> str:
        if not self.cipher_suite:
            return token
        return self.cipher_suite.encrypt(token.encode()).decode()

    def _decrypt(self, stored: str) -> str:
        if not self.cipher_suite:
            return stored
        try:
            return self.cipher_suite.decrypt(stored.encode()).decode()
        except InvalidToken:
            logger.warning("Stored token is not encrypted with the current key, using it as-is")
            return stored

    def load(self) -> Optional[TokenPair]:
        db = self.session_factory()
        try:
            row = db.query(Cafe24Token).filter(Cafe24Token.key == TOKEN_STORE_KEY).first()
            if not row:
                return None
            return TokenPair(
                access_token=self._decrypt(row.access_token),
                refresh_token=self._decrypt(row.refresh_token),
                updated_at=row.updated_at,
            )
        finally:
            db.close()

    def save(self, pair: TokenPair) -> None:
        db = self.session_factory()
        try:
            row = db.query(Cafe24Token).filter(Cafe24Token.key == TOKEN_STORE_KEY).first()
            if not row:
                row = Cafe24Token(key=TOKEN_STORE_KEY)
                db.add(row)
            row.access_token = self._encrypt(pair.access_token)
            row.refresh_token = self._encrypt(pair.refresh_token)
            row.updated_at = pair.updated_at or datetime.utcnow()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
