from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from chirpy.app import ChirpyApp
from chirpy.core.document_store import DocumentStore
from chirpy.services.repository import AccountRepository, PostRepository
from chirpy.utils.config import AuthSettings, Settings, StorageSettings

TEST_SECRET = "test-signing-secret"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "database.json"


@pytest.fixture
def store(db_path):
    return DocumentStore(db_path)


@pytest.fixture
def posts_repo(store):
    return PostRepository(store)


@pytest.fixture
def accounts_repo(store):
    return AccountRepository(store)


@pytest.fixture
def settings(db_path):
    return Settings(
        storage=StorageSettings(path=str(db_path)),
        # Lowest bcrypt cost keeps the suite fast
        auth=AuthSettings(jwt_secret=TEST_SECRET, bcrypt_rounds=4),
    )


@pytest.fixture
def context(settings, clock):
    return ChirpyApp(settings=settings, clock=clock).initialize(configure_logging=False)
