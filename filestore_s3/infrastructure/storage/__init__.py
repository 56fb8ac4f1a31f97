"""Adapters de infraestructura: Storage S3."""

from .client import build_s3_client
from .config import (
    DEFAULT_ACL,
    SERVICE_PARAM_KEYS,
    S3ConnectionConfig,
    S3StoreConfig,
    normalize_folder,
)
from .errors import (
    StorageConfigurationError,
    StorageError,
    StorageOperationNotSupportedError,
    StorageReadError,
)
from .keys import resolve_file_key
from .read_stream import S3ReadStream, is_transient_storage_error
from .registry import StoreRegistry, create_s3_store, default_registry
from .s3_store import S3_TYPE_NAME, S3Store
from .write_stream import PUT_PARAM_KEYS, S3WriteStream, build_put_params

__all__ = [
    "DEFAULT_ACL",
    "PUT_PARAM_KEYS",
    "S3_TYPE_NAME",
    "SERVICE_PARAM_KEYS",
    "S3ConnectionConfig",
    "S3ReadStream",
    "S3Store",
    "S3StoreConfig",
    "S3WriteStream",
    "StorageConfigurationError",
    "StorageError",
    "StorageOperationNotSupportedError",
    "StorageReadError",
    "StoreRegistry",
    "build_put_params",
    "build_s3_client",
    "create_s3_store",
    "default_registry",
    "is_transient_storage_error",
    "normalize_folder",
    "resolve_file_key",
]
