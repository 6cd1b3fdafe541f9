"""Custom exceptions for the Chirpy record store"""


class ChirpyError(Exception):
    """Base exception for Chirpy"""
    pass


class ValidationError(ChirpyError):
    """Input violates a stated constraint (e.g. oversize post body)"""
    pass


class NotFoundError(ChirpyError):
    """Lookup miss for an entity"""

    def __init__(self, message: str, entity: str = "", entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message)


class DuplicateEmailError(ChirpyError):
    """An account with this email already exists"""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email is already registered")


class InvalidCredentialsError(ChirpyError):
    """Email/password pair did not authenticate. Never says which one was wrong."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidTokenError(ChirpyError):
    """Session or renewal token was rejected"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Token signature is valid but its expiry has passed"""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class InvalidSignatureError(InvalidTokenError):
    """Token was not signed with our secret, or was tampered with"""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message)


class MalformedTokenError(InvalidTokenError):
    """Token could not be parsed into the expected claims"""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


class HashingError(ChirpyError):
    """Password could not be hashed"""
    pass


class StorageError(ChirpyError):
    """Error reading or writing the backing document"""
    pass


class DocumentDecodeError(StorageError):
    """Stored document is not valid"""
    pass


class DocumentEncodeError(StorageError):
    """Document could not be serialized"""
    pass


class ConfigError(ChirpyError):
    """Configuration error"""
    pass
