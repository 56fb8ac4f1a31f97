"""
Name: S3 Store Configuration Tests

Responsibilities:
  - Validate folder normalization
  - Validate fail-fast checks (bucket, credentials)
  - Validate precedence: explicit argument > environment > error
  - Validate translation to boto3/botocore kwargs (no network)
"""

from unittest.mock import ANY, MagicMock, patch

import pytest

from filestore_s3.crosscutting.config import Settings
from filestore_s3.infrastructure.storage import (
    S3ConnectionConfig,
    S3StoreConfig,
    StorageConfigurationError,
    build_s3_client,
    normalize_folder,
)
from filestore_s3.infrastructure.storage.client import (
    botocore_config_kwargs,
    client_kwargs,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def env_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "env-key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "env-secret")


# ---------------------------------------------------------------------------
# normalize_folder
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        (None, ""),
        ("/", ""),
        ("uploads", "uploads/"),
        ("/uploads", "uploads/"),
        ("uploads/", "uploads/"),
        ("/a/b", "a/b/"),
    ],
)
def test_normalize_folder(raw, expected):
    assert normalize_folder(raw) == expected


def test_store_config_normalizes_folder_and_defaults_acl(connection):
    config = S3StoreConfig(bucket=" bucket ", connection=connection, folder="/x", acl="")

    assert config.bucket == "bucket"
    assert config.folder == "x/"
    assert config.acl == "private"
    assert config.object_key("a.txt") == "x/a.txt"


# ---------------------------------------------------------------------------
# Fail-fast
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("bucket", ["", "   ", None])
def test_bucket_is_required(connection, bucket):
    with pytest.raises(StorageConfigurationError, match="bucket"):
        S3StoreConfig(bucket=bucket, connection=connection)


@pytest.mark.parametrize(
    "key, secret", [("", "secret"), ("key", ""), ("  ", "secret")]
)
def test_credentials_are_required(key, secret):
    with pytest.raises(StorageConfigurationError, match="credentials"):
        S3ConnectionConfig(access_key_id=key, secret_access_key=secret)


def test_from_options_drops_unknown_keys():
    connection = S3ConnectionConfig.from_options(
        {
            "access_key_id": "key",
            "secret_access_key": "secret",
            "region": "eu-west-1",
            "bucket": "not-a-connection-option",
            "httpOptions": {"timeout": 1},
        }
    )

    assert connection.region == "eu-west-1"
    assert not hasattr(connection, "bucket")


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


def test_from_settings_reads_environment(monkeypatch, env_credentials):
    monkeypatch.setenv("S3_BUCKET", "env-bucket")
    monkeypatch.setenv("S3_FOLDER", "/media")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "sa-east-1")

    config = S3StoreConfig.from_settings(Settings())

    assert config.bucket == "env-bucket"
    assert config.folder == "media/"
    assert config.name == "s3"
    assert config.connection.access_key_id == "env-key"
    assert config.connection.secret_access_key == "env-secret"
    assert config.connection.region == "sa-east-1"


def test_explicit_arguments_win_over_environment(monkeypatch, env_credentials):
    monkeypatch.setenv("S3_BUCKET", "env-bucket")

    config = S3StoreConfig.from_settings(
        Settings(),
        name="avatars",
        bucket="explicit-bucket",
        acl="public-read",
        access_key_id="explicit-key",
        endpoint_url="http://localhost:9000",
    )

    assert config.bucket == "explicit-bucket"
    assert config.name == "avatars"
    assert config.acl == "public-read"
    assert config.connection.access_key_id == "explicit-key"
    assert config.connection.secret_access_key == "env-secret"
    assert config.connection.endpoint_url == "http://localhost:9000"


def test_missing_bucket_everywhere_raises(env_credentials):
    with pytest.raises(StorageConfigurationError, match="bucket"):
        S3StoreConfig.from_settings(Settings())


def test_missing_credentials_everywhere_raises():
    with pytest.raises(StorageConfigurationError, match="credentials"):
        S3StoreConfig.from_settings(Settings(), bucket="bucket")


def test_unknown_connection_override_is_dropped(env_credentials):
    config = S3StoreConfig.from_settings(
        Settings(), bucket="b", maxRedirects=3, region="eu-west-1"
    )

    assert config.connection.region == "eu-west-1"
    assert not hasattr(config.connection, "maxRedirects")


def test_from_settings_uses_cached_settings_by_default(monkeypatch, env_credentials):
    monkeypatch.setenv("S3_BUCKET", "cached-bucket")

    assert S3StoreConfig.from_settings().bucket == "cached-bucket"


# ---------------------------------------------------------------------------
# boto3 / botocore kwargs
# ---------------------------------------------------------------------------


def test_client_kwargs_pass_through(connection):
    assert client_kwargs(connection) == {
        "aws_access_key_id": "key",
        "aws_secret_access_key": "secret",
        "use_ssl": True,
        "verify": True,
        "region_name": "us-east-1",
        "endpoint_url": "http://minio:9000",
    }


def test_client_kwargs_include_session_token():
    connection = S3ConnectionConfig(
        access_key_id="k", secret_access_key="s", session_token="t"
    )

    kwargs = client_kwargs(connection)

    assert kwargs["aws_session_token"] == "t"
    assert "region_name" not in kwargs
    assert "endpoint_url" not in kwargs


def test_botocore_config_kwargs():
    connection = S3ConnectionConfig(
        access_key_id="k",
        secret_access_key="s",
        max_retries=2,
        force_path_style=True,
        signature_version="s3v4",
        connect_timeout=5,
        read_timeout=30,
    )

    assert botocore_config_kwargs(connection) == {
        "retries": {"max_attempts": 3, "mode": "standard"},
        "s3": {"addressing_style": "path"},
        "signature_version": "s3v4",
        "connect_timeout": 5,
        "read_timeout": 30,
    }


def test_botocore_config_kwargs_empty_by_default():
    connection = S3ConnectionConfig(access_key_id="k", secret_access_key="s")

    assert botocore_config_kwargs(connection) == {}


def test_build_s3_client_uses_boto3(connection):
    fake_client = MagicMock()

    with patch("boto3.client", return_value=fake_client) as client_factory:
        result = build_s3_client(connection)

    assert result is fake_client
    client_factory.assert_called_once_with(
        "s3",
        config=ANY,
        aws_access_key_id="key",
        aws_secret_access_key="secret",
        use_ssl=True,
        verify=True,
        region_name="us-east-1",
        endpoint_url="http://minio:9000",
    )
