"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Provide reusable test fixtures
  - Mock the boto3 S3 client (no network)
  - Isolate Settings from the developer's .env / environment

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - botocore.exceptions: real SDK error types for realistic failures

Notes:
  - Fixtures are auto-discovered by pytest
  - Retry delays are zero in tests (no real sleeping)
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from botocore.exceptions import ClientError  # noqa: E402

from filestore_s3.crosscutting import config as app_config  # noqa: E402
from filestore_s3.domain import StoredFile  # noqa: E402
from filestore_s3.infrastructure.storage import (  # noqa: E402
    S3ConnectionConfig,
    S3Store,
    S3StoreConfig,
)

app_config.Settings.model_config["env_file"] = None

_SETTINGS_ENV_VARS = (
    "STORE_NAME",
    "S3_BUCKET",
    "S3_FOLDER",
    "S3_ACL",
    "S3_ENDPOINT_URL",
    "S3_ACCESS_KEY",
    "S3_SECRET_KEY",
    "S3_SESSION_TOKEN",
    "S3_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_DEFAULT_REGION",
    "READ_TRIES",
    "READ_TRY_FREQ_MS",
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Fakes
# ============================================================================


class FakeBody:
    """
    Minimal stand-in for botocore's StreamingBody.

    Serves `data` in read(amt) slices. If `fail_after` is set, raises
    `error` once that many bytes have been served.
    """

    def __init__(self, data: bytes, *, fail_after: int | None = None, error=None):
        self._data = data
        self._offset = 0
        self._fail_after = fail_after
        self._error = error
        self.closed = False

    def read(self, amt=None):
        if self._fail_after is not None and self._offset >= self._fail_after:
            raise self._error
        end = len(self._data) if amt is None else self._offset + amt
        if self._fail_after is not None:
            end = min(end, self._fail_after)
        chunk = self._data[self._offset : end]
        self._offset += len(chunk)
        return chunk

    def close(self):
        self.closed = True


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def s3_response():
    """R: Factory of get_object responses backed by a FakeBody."""

    def _make(data: bytes, *, etag: str = '"etag-1"', **body_kwargs) -> dict:
        return {
            "Body": FakeBody(data, **body_kwargs),
            "ETag": etag,
            "ContentLength": len(data),
        }

    return _make


@pytest.fixture
def s3_error():
    """R: Factory of botocore ClientError with a given S3 error code."""

    def _make(code: str, operation: str = "GetObject") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": code}}, operation)

    return _make


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """R: Each test starts with a clean environment and an empty settings cache."""
    for var in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    app_config.get_settings.cache_clear()
    yield
    app_config.get_settings.cache_clear()


@pytest.fixture
def connection() -> S3ConnectionConfig:
    return S3ConnectionConfig(
        access_key_id="key",
        secret_access_key="secret",
        region="us-east-1",
        endpoint_url="http://minio:9000",
    )


@pytest.fixture
def store_config(connection: S3ConnectionConfig) -> S3StoreConfig:
    return S3StoreConfig(
        bucket="bucket",
        connection=connection,
        name="s3",
        folder="/uploads",
    )


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def sleeps() -> list:
    """R: Records requested sleep durations instead of sleeping."""
    return []


@pytest.fixture
def store(store_config: S3StoreConfig, mock_client: MagicMock, sleeps: list) -> S3Store:
    return S3Store(
        store_config,
        client=mock_client,
        read_tries=3,
        read_try_freq_ms=0,
        sleep=sleeps.append,
    )


@pytest.fixture
def sample_file() -> StoredFile:
    return StoredFile(id="abc123", collection_name="images", original_name="cat.png")
