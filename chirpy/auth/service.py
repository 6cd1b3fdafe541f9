"""
Authentication facade used by the HTTP layer.

Wraps the credential, session token and renewal token services behind
the calls a handler makes: register, login, renew, revoke, update.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..models.account import AccountView
from ..utils.exceptions import InvalidCredentialsError, NotFoundError
from ..utils.logger import get_logger
from .credentials import CredentialService
from .renewal_tokens import RenewalTokenManager
from .session_tokens import SessionTokenIssuer

logger = get_logger(__name__)


class LoginResult(BaseModel):
    account_id: int
    email: str
    session_token: str
    renewal_token: str


class AuthService:
    def __init__(
        self,
        credentials: CredentialService,
        sessions: SessionTokenIssuer,
        renewals: RenewalTokenManager,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.renewals = renewals

    def register(self, email: str, password: str) -> AccountView:
        return self.credentials.register(email, password).public()

    def login(self, email: str, password: str, requested_ttl: Optional[int] = None) -> LoginResult:
        """Check the password and hand out a session token plus the renewal token."""
        try:
            account = self.credentials.verify(email, password)
        except (NotFoundError, InvalidCredentialsError):
            logger.info("Login failed")
            raise InvalidCredentialsError()

        session_token = self.sessions.issue(account.id, requested_ttl)
        renewal = self.renewals.get_or_issue(account.id)
        logger.info("Login succeeded", account_id=account.id)
        return LoginResult(
            account_id=account.id,
            email=account.email,
            session_token=session_token,
            renewal_token=renewal.token,
        )

    def authenticate(self, session_token: str) -> int:
        """Account id carried by a valid session token"""
        return self.sessions.verify(session_token)

    def renew(self, renewal_token: str) -> str:
        return self.renewals.exchange(renewal_token)

    def revoke(self, renewal_token: str) -> None:
        self.renewals.revoke(renewal_token)

    def update_account(self, account_id: int, new_email: str, new_password: str) -> AccountView:
        return self.credentials.update_credentials(account_id, new_email, new_password).public()
