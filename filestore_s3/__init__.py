"""filestore_s3: adaptador de storage S3-compatible para un framework de archivos."""

from .domain import FileRecord, KeyContext, RemoveResult, StoredFile, StoreInfo
from .infrastructure.storage import (
    S3_TYPE_NAME,
    S3ReadStream,
    S3Store,
    S3StoreConfig,
    S3WriteStream,
    StorageConfigurationError,
    StorageError,
    StorageOperationNotSupportedError,
    StorageReadError,
)

__all__ = [
    "FileRecord",
    "KeyContext",
    "RemoveResult",
    "S3_TYPE_NAME",
    "S3ReadStream",
    "S3Store",
    "S3StoreConfig",
    "S3WriteStream",
    "StorageConfigurationError",
    "StorageError",
    "StorageOperationNotSupportedError",
    "StorageReadError",
    "StoredFile",
    "StoreInfo",
]
