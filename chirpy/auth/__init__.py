from .credentials import CredentialService
from .passwords import hash_password, verify_password
from .renewal_tokens import RenewalTokenManager
from .service import AuthService, LoginResult
from .session_tokens import SessionTokenIssuer

__all__ = [
    "AuthService",
    "CredentialService",
    "LoginResult",
    "RenewalTokenManager",
    "SessionTokenIssuer",
    "hash_password",
    "verify_password",
]
