"""
Name: S3 Write Stream Tests

Responsibilities:
  - Validate PutObject parameter normalization (aliases, drops, defaults)
  - Validate upload on close via put_object (no network)
  - Validate abort / error passthrough

Collaborators:
  - build_put_params / S3WriteStream (SUT)
  - MagicMock boto3 client
"""

import gc
from unittest.mock import ANY, MagicMock

import pytest

from filestore_s3.infrastructure.storage import S3WriteStream, build_put_params

pytestmark = pytest.mark.unit


def _params(options, **kwargs):
    defaults = {"bucket": "bucket", "folder": "uploads/", "default_acl": "private"}
    defaults.update(kwargs)
    return build_put_params("images/abc-cat.png", options, **defaults)


# ---------------------------------------------------------------------------
# build_put_params
# ---------------------------------------------------------------------------


def test_content_type_maps_to_s3_name_with_defaults():
    params = _params({"content_type": "text/plain"})

    assert params == {
        "Bucket": "bucket",
        "Key": "uploads/images/abc-cat.png",
        "ACL": "private",
        "ContentType": "text/plain",
    }


def test_aliases_and_metadata_are_dropped():
    params = _params(
        {
            "content_type": "text/plain",
            "aliases": ["a", "b"],
            "metadata": {"owner": "x"},
        }
    )

    assert "aliases" not in params
    assert "metadata" not in params
    assert "content_type" not in params
    assert "Metadata" not in params


def test_caller_values_win_over_defaults():
    params = _params({"ACL": "public-read", "StorageClass": "STANDARD_IA"})

    assert params["ACL"] == "public-read"
    assert params["StorageClass"] == "STANDARD_IA"
    assert params["Bucket"] == "bucket"


def test_unknown_options_are_dropped():
    params = _params({"fileKey": "x", "Body": b"nope", "CacheControl": "no-cache"})

    assert "fileKey" not in params
    assert "Body" not in params
    assert params["CacheControl"] == "no-cache"


def test_options_are_not_mutated():
    options = {"content_type": "image/png", "aliases": ["a"]}

    _params(options)

    assert options == {"content_type": "image/png", "aliases": ["a"]}


def test_no_options_gives_defaults_only():
    assert _params(None, folder="") == {
        "Bucket": "bucket",
        "Key": "images/abc-cat.png",
        "ACL": "private",
    }


# ---------------------------------------------------------------------------
# S3WriteStream
# ---------------------------------------------------------------------------


def test_close_uploads_written_bytes():
    client = MagicMock()
    uploaded = {}

    def _put_object(**kwargs):
        uploaded["body"] = kwargs["Body"].read()
        uploaded["params"] = {k: v for k, v in kwargs.items() if k != "Body"}

    client.put_object.side_effect = _put_object
    params = _params({"content_type": "text/plain"})

    with S3WriteStream(client, params) as out:
        out.write(b"hello ")
        out.write(b"world")

    assert uploaded["body"] == b"hello world"
    assert uploaded["params"] == params
    assert out.bytes_written == 11


def test_close_twice_uploads_once():
    client = MagicMock()
    out = S3WriteStream(client, _params(None))
    out.write(b"x")

    out.close()
    out.close()

    client.put_object.assert_called_once_with(
        Body=ANY, Bucket="bucket", Key="uploads/images/abc-cat.png", ACL="private"
    )


def test_abort_discards_without_upload():
    client = MagicMock()
    out = S3WriteStream(client, _params(None))
    out.write(b"partial")

    out.abort()

    client.put_object.assert_not_called()
    assert out.closed is True


def test_exception_inside_with_block_does_not_upload():
    client = MagicMock()

    with pytest.raises(RuntimeError):
        with S3WriteStream(client, _params(None)) as out:
            out.write(b"partial")
            raise RuntimeError("boom")

    client.put_object.assert_not_called()


def test_backend_error_propagates_unchanged():
    client = MagicMock()
    error = ConnectionResetError("reset by peer")
    client.put_object.side_effect = error
    out = S3WriteStream(client, _params(None))
    out.write(b"data")

    with pytest.raises(ConnectionResetError) as exc_info:
        out.close()

    assert exc_info.value is error
    assert client.put_object.call_count == 1
    assert out.closed is True


def test_write_after_close_raises():
    out = S3WriteStream(MagicMock(), _params(None))
    out.close()

    with pytest.raises(ValueError):
        out.write(b"late")


def test_unclosed_stream_is_discarded_on_garbage_collection():
    client = MagicMock()
    client.put_object.side_effect = ConnectionError("down")
    out = S3WriteStream(client, _params(None))
    out.write(b"half")

    del out
    gc.collect()

    client.put_object.assert_not_called()


@pytest.mark.parametrize(
    "options",
    [
        {"content_type": "text/plain", "ContentType": "application/json"},
        {"ContentType": "application/json", "content_type": "text/plain"},
    ],
)
def test_content_type_alias_wins_regardless_of_order(options):
    assert _params(options)["ContentType"] == "text/plain"
