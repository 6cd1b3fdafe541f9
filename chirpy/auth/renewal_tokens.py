"""
Long-lived renewal tokens.

Each account has at most one live renewal token. Per account the token
moves absent -> active -> (revoked | expired); an expired token is
treated exactly like an absent one. Exchanging a token for a new session
token does not rotate or consume it.
"""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..core.document_store import DocumentStore
from ..models.document import Document, RenewalToken
from ..utils.clock import utcnow
from ..utils.exceptions import InvalidTokenError
from ..utils.logger import get_logger
from .session_tokens import SessionTokenIssuer

logger = get_logger(__name__)

TOKEN_BYTES = 32
DEFAULT_TTL_DAYS = 60


class RenewalTokenManager:
    """Issues, validates and revokes renewal tokens"""

    def __init__(
        self,
        store: DocumentStore,
        issuer: SessionTokenIssuer,
        ttl: timedelta = timedelta(days=DEFAULT_TTL_DAYS),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.issuer = issuer
        self.ttl = ttl
        self.clock = clock

    def _active_for(self, document: Document, account_id: int) -> Optional[RenewalToken]:
        current = document.renewal_tokens.get(account_id)
        if current is None or current.is_expired(self.clock()):
            return None
        return current

    def _match(self, document: Document, value: str) -> Optional[RenewalToken]:
        for entry in document.renewal_tokens.values():
            if hmac.compare_digest(entry.token.encode("utf-8"), value.encode("utf-8")):
                return entry
        return None

    def _store(self, document: Document, token: RenewalToken) -> None:
        # One token per owner, whatever key an older entry was filed under
        stale = [k for k, v in document.renewal_tokens.items() if v.owner_id == token.owner_id]
        for key in stale:
            del document.renewal_tokens[key]
        document.renewal_tokens[token.owner_id] = token

    def get_or_issue(self, account_id: int) -> RenewalToken:
        """Return the account's live token, issuing a fresh one if there is none."""
        with self.store.read() as document:
            current = self._active_for(document, account_id)
        if current is not None:
            return current

        with self.store.transaction() as document:
            # Another login may have issued one since the read above
            current = self._active_for(document, account_id)
            if current is not None:
                return current
            token = RenewalToken.issue(
                owner_id=account_id,
                token=secrets.token_hex(TOKEN_BYTES),
                now=self.clock(),
                ttl=self.ttl,
            )
            self._store(document, token)
        logger.info("Renewal token issued", account_id=account_id, expires_at=token.expires_at.isoformat())
        return token

    def exchange(self, value: str) -> str:
        """Trade a live renewal token for a new session token (default ttl)."""
        if not value:
            raise InvalidTokenError("Invalid renewal token")
        with self.store.read() as document:
            entry = self._match(document, value)
        if entry is None or entry.is_expired(self.clock()):
            raise InvalidTokenError("Invalid renewal token")
        return self.issuer.issue(entry.owner_id)

    def revoke(self, value: str) -> None:
        """Delete the matching token if any. Unknown tokens are ignored."""
        if not value:
            return
        with self.store.read() as document:
            if self._match(document, value) is None:
                return
        with self.store.transaction() as document:
            entry = self._match(document, value)
            if entry is None:
                return
            del document.renewal_tokens[entry.owner_id]
        logger.info("Renewal token revoked", account_id=entry.owner_id)

    def purge_expired(self) -> int:
        """Remove expired tokens and return how many were dropped."""
        now = self.clock()
        with self.store.read() as document:
            if not any(t.is_expired(now) for t in document.renewal_tokens.values()):
                return 0
        with self.store.transaction() as document:
            expired = [k for k, t in document.renewal_tokens.items() if t.is_expired(now)]
            for key in expired:
                del document.renewal_tokens[key]
        if expired:
            logger.info("Expired renewal tokens purged", count=len(expired))
        return len(expired)
