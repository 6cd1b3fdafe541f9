"""
Account registration and password verification.

Hashing happens before the document is locked; the uniqueness check and
the insert happen in one transaction.
"""

from __future__ import annotations

import secrets

from ..models.account import Account
from ..services.repository import AccountRepository
from ..utils.exceptions import DuplicateEmailError, InvalidCredentialsError, NotFoundError
from ..utils.logger import get_logger
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password

logger = get_logger(__name__)


class CredentialService:
    """Register, verify and update account credentials"""

    def __init__(self, accounts: AccountRepository, rounds: int = DEFAULT_ROUNDS):
        self.accounts = accounts
        self.rounds = rounds
        self._dummy_hash = None

    def _decoy_hash(self) -> str:
        # Unknown emails are checked against this so both paths cost one bcrypt check
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(secrets.token_hex(16), rounds=self.rounds)
        return self._dummy_hash

    def register(self, email: str, password: str) -> Account:
        password_hash = hash_password(password, rounds=self.rounds)
        with self.accounts.store.transaction() as document:
            if self.accounts.email_owner(document, email) is not None:
                raise DuplicateEmailError(email)
            account = self.accounts.add(document, email=email, password_hash=password_hash)
        logger.info("Account registered", account_id=account.id)
        return account

    def verify(self, email: str, password: str) -> Account:
        """Return the account if the password matches.

        Raises NotFoundError when no account has this email and
        InvalidCredentialsError when the password is wrong.
        """
        account = self.accounts.find_by_email(email)
        if account is None:
            verify_password(password, self._decoy_hash())
            raise NotFoundError("Account not found", entity="account")
        if not verify_password(password, account.password_hash):
            raise InvalidCredentialsError()
        return account

    def update_credentials(self, account_id: int, new_email: str, new_password: str) -> Account:
        password_hash = hash_password(new_password, rounds=self.rounds)
        with self.accounts.store.transaction() as document:
            current = self.accounts.lookup(document, account_id)
            owner = self.accounts.email_owner(document, new_email)
            if owner is not None and owner.id != account_id:
                raise DuplicateEmailError(new_email)
            updated = current.model_copy(update={"email": new_email, "password_hash": password_hash})
            self.accounts.put(document, updated)
        logger.info("Account credentials updated", account_id=account_id)
        return updated
