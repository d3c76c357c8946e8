"""Root pytest configuration for blobcopy tests."""
import pytest

from blobcopy.settings import Settings
from tests.storage.fakes.fake_store import FakeObjectStore

_ENV_VARS = [
    "AZURE_STORAGE_CONNECTION_STRING",
    "AZURE_STORAGE_ACCOUNT",
    "AZURE_STORAGE_KEY",
    "BLOBCOPY_CONTAINER",
    "BLOBCOPY_AZURE_BLOB_ENDPOINT",
    "BLOBCOPY_TIMEOUT",
    "BLOBCOPY_COPY_POLL_INTERVAL",
    "BLOBCOPY_COPY_TIMEOUT",
    "BLOBCOPY_STAGING_DIR",
    "BLOBCOPY_PARALLEL_VERIFY",
]


# Isolate tests from the developer's environment
@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Automatically clear blobcopy and Azure environment variables."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    """Standard test settings (account+key auth)."""
    return Settings(
        container="test-container",
        az_account="testaccount",
        az_key="dGVzdGtleQ==",
        copy_poll_interval_s=0.001,
        copy_timeout_s=5.0,
    )


@pytest.fixture
def store():
    """Standard fake object store for testing."""
    return FakeObjectStore()


@pytest.fixture
def staging_dir(tmp_path):
    """Empty directory used as the verification staging area."""
    path = tmp_path / "staging"
    path.mkdir()
    return path
