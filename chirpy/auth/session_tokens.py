"""
Stateless session tokens.

A session token is a JSON claim set ``{iss, sub, iat, exp}`` signed with
HMAC-SHA256 (itsdangerous). Nothing is stored server-side: anyone holding
the secret can verify one, and a token is only as revocable as its expiry.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from itsdangerous import BadPayload, BadSignature, URLSafeSerializer

from ..utils.clock import utcnow
from ..utils.exceptions import (
    ConfigError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
    ValidationError,
)

DEFAULT_TTL_SECONDS = 3600
TOKEN_SALT = "chirpy-session"


class SessionTokenIssuer:
    """Issues and verifies signed session tokens bound to an account id"""

    def __init__(
        self,
        secret: str,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        issuer: str = "chirpy",
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ConfigError("A signing secret (JWT_SECRET) is required for session tokens")
        if default_ttl <= 0:
            raise ConfigError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self.issuer = issuer
        self.clock = clock
        self._serializer = URLSafeSerializer(
            secret_key=secret,
            salt=TOKEN_SALT,
            signer_kwargs={"digest_method": hashlib.sha256},
        )

    def effective_ttl(self, requested_ttl: Optional[int] = None) -> int:
        """requested_ttl when it is set and shorter than the default, else the default"""
        if requested_ttl is None or requested_ttl == 0:
            return self.default_ttl
        if requested_ttl < 0:
            raise ValidationError("Requested token lifetime cannot be negative")
        return min(requested_ttl, self.default_ttl)

    def issue(self, account_id: int, requested_ttl: Optional[int] = None) -> str:
        ttl = self.effective_ttl(requested_ttl)
        issued_at = self.clock().timestamp()
        # exp keeps the fractional second so a token lives its full ttl
        claims: Dict[str, Any] = {
            "iss": self.issuer,
            "sub": str(account_id),
            "iat": int(issued_at),
            "exp": issued_at + ttl,
        }
        return self._serializer.dumps(claims)

    def verify(self, token: str) -> int:
        """Return the account id the token was issued for.

        Raises MalformedTokenError, InvalidSignatureError or TokenExpiredError.
        """
        if not token or not isinstance(token, str) or "." not in token:
            raise MalformedTokenError()
        try:
            claims = self._serializer.loads(token)
        except BadPayload:
            raise MalformedTokenError()
        except BadSignature:
            raise InvalidSignatureError()

        if not isinstance(claims, dict):
            raise MalformedTokenError()
        try:
            account_id = int(claims["sub"])
            expires_at = float(claims["exp"])
            int(claims["iat"])
        except (KeyError, TypeError, ValueError):
            raise MalformedTokenError()
        if claims.get("iss") != self.issuer:
            raise InvalidSignatureError("Token was issued by another service")

        if self.clock().timestamp() > expires_at:
            raise TokenExpiredError()
        return account_id
