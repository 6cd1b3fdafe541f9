"""Application context: wires settings, store and services together"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from .auth.credentials import CredentialService
from .auth.renewal_tokens import RenewalTokenManager
from .auth.service import AuthService
from .auth.session_tokens import SessionTokenIssuer
from .core.document_store import DocumentStore
from .services.post_service import PostService
from .services.repository import AccountRepository, PostRepository
from .utils.clock import utcnow
from .utils.config import ConfigManager, Settings
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class HitCounter:
    """Thread-safe visit counter"""

    def __init__(self):
        self._lock = threading.Lock()
        self._hits = 0

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    def reset(self) -> None:
        with self._lock:
            self._hits = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._hits


class ChirpyApp:
    """Owns every shared object a request handler needs"""

    def __init__(self, settings: Optional[Settings] = None, clock: Callable[[], datetime] = utcnow):
        self.settings = settings
        self.clock = clock
        self.hits = HitCounter()
        self.store = None
        self.post_repository = None
        self.account_repository = None
        self.posts = None
        self.credentials = None
        self.sessions = None
        self.renewals = None
        self.auth = None

    def initialize(self, configure_logging: bool = True) -> "ChirpyApp":
        """Load configuration (unless given) and build the services"""
        if self.settings is None:
            self.settings = ConfigManager().load_settings()
        settings = self.settings

        if configure_logging:
            setup_logger(
                log_level=settings.logging.level,
                log_format=settings.logging.format,
                file_path=settings.logging.file_path,
                max_bytes=settings.logging.max_bytes,
                backup_count=settings.logging.backup_count,
            )

        self.store = DocumentStore(settings.storage.path)
        self.post_repository = PostRepository(self.store)
        self.account_repository = AccountRepository(self.store)
        self.posts = PostService(
            self.post_repository,
            self.account_repository,
            max_length=settings.posts.max_length,
        )
        self.credentials = CredentialService(self.account_repository, rounds=settings.auth.bcrypt_rounds)
        self.sessions = SessionTokenIssuer(
            settings.auth.jwt_secret,
            default_ttl=settings.auth.session_ttl_seconds,
            issuer=settings.auth.issuer,
            clock=self.clock,
        )
        self.renewals = RenewalTokenManager(
            self.store,
            self.sessions,
            ttl=timedelta(days=settings.auth.renewal_ttl_days),
            clock=self.clock,
        )
        self.auth = AuthService(self.credentials, self.sessions, self.renewals)

        logger.info(
            "Application initialized",
            app_name=settings.app.name,
            version=settings.app.version,
            environment=settings.app.environment,
            db_path=str(self.store.path),
        )
        return self
