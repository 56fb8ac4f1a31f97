"""
===============================================================================
CRC CARD — infrastructure/storage/s3_store.py
===============================================================================

Clase:
  S3Store (Adapter / Facade)

Responsabilidades:
  - Implementar StorageAdapterPort contra S3-compatible (AWS S3 / MinIO).
  - Resolver keys de archivos (política estable, ver keys.py).
  - Abrir streams de lectura (con retry) y de escritura (parámetros normalizados).
  - Borrar objetos devolviendo RemoveResult (error del backend sin tocar).
  - Rechazar watch/sync.

Colaboradores:
  - domain.services.StorageAdapterPort / RemoveResult
  - infrastructure/storage/config.S3StoreConfig
  - infrastructure/storage/client.build_s3_client
  - infrastructure/storage/read_stream.S3ReadStream
  - infrastructure/storage/write_stream (build_put_params, S3WriteStream)

Decisiones de diseño:
  - Cliente inyectable para tests (mocks).
  - Cada llamada crea su propio stream/estado: sin estado compartido mutable.
===============================================================================
"""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Optional

from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_operation
from ...domain.files import FileRecord
from ...domain.services import RemoveResult, StorageAdapterPort
from .client import build_s3_client
from .config import S3StoreConfig
from .errors import StorageOperationNotSupportedError
from .keys import resolve_file_key
from .read_stream import DEFAULT_TRIES, DEFAULT_TRY_FREQ_MS, S3ReadStream
from .write_stream import S3WriteStream, build_put_params

S3_TYPE_NAME = "storage.s3"

RemoveCallback = Callable[[Optional[BaseException], bool], Any]


class S3Store(StorageAdapterPort):
    """
    Store S3 para el framework de archivos.

    Implementa:
      - file_key
      - open_read_stream
      - open_write_stream
      - remove
      - watch (no soportado)
    """

    type_name = S3_TYPE_NAME

    def __init__(
        self,
        config: S3StoreConfig,
        *,
        client=None,
        read_tries: int = DEFAULT_TRIES,
        read_try_freq_ms: int = DEFAULT_TRY_FREQ_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._read_tries = read_tries
        self._read_try_freq_ms = read_try_freq_ms
        self._sleep = sleep

        # Cliente: inyectable para tests (mocks).
        self._client = client if client is not None else build_s3_client(
            config.connection
        )

        logger.info(
            "S3 store ready",
            extra={
                "store": config.name,
                "bucket": config.bucket,
                "folder": config.folder,
                "endpoint_url": config.connection.endpoint_url,
            },
        )

    # =========================================================================
    # Propiedades
    # =========================================================================

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def bucket(self) -> str:
        return self._config.bucket

    @property
    def folder(self) -> str:
        return self._config.folder

    @property
    def config(self) -> S3StoreConfig:
        return self._config

    # =========================================================================
    # API pública (Port)
    # =========================================================================

    def file_key(self, file_record: FileRecord) -> str:
        """Key (sin folder) para el archivo en este store."""
        return resolve_file_key(
            file_record, self._config.name, key_function=self._config.file_key
        )

    def open_read_stream(
        self,
        key: str,
        *,
        tries: int | None = None,
        try_freq_ms: int | None = None,
    ) -> S3ReadStream:
        """
        Devuelve un stream legible de `folder + key`.

        No hace red: el primer get_object ocurre en la primera lectura.
        """
        return S3ReadStream(
            self._client,
            bucket=self._config.bucket,
            key=key,
            object_key=self._config.object_key(key),
            tries=self._read_tries if tries is None else tries,
            try_freq_ms=(
                self._read_try_freq_ms if try_freq_ms is None else try_freq_ms
            ),
            sleep=self._sleep,
        )

    def open_write_stream(
        self, key: str, options: Mapping[str, Any] | None = None
    ) -> S3WriteStream:
        """Devuelve un stream escribible; sube a `folder + key` al cerrar."""
        params = build_put_params(
            key,
            options,
            bucket=self._config.bucket,
            folder=self._config.folder,
            default_acl=self._config.acl,
        )
        return S3WriteStream(self._client, params)

    def remove(
        self, key: str, *, callback: RemoveCallback | None = None
    ) -> RemoveResult:
        """
        Borra `folder + key`.

        - Sin retries.
        - NoSuchKey/404 no se trata distinto: success=False y el error tal cual.
        """
        object_key = self._config.object_key(key)
        error: Optional[BaseException] = None
        try:
            self._client.delete_object(Bucket=self._config.bucket, Key=object_key)
        except Exception as exc:
            error = exc
            logger.warning(
                "S3 delete failed",
                extra={
                    "bucket": self._config.bucket,
                    "key": object_key,
                    "error_type": type(exc).__name__,
                },
            )

        result = RemoveResult.from_error(error)
        record_operation("remove", success=result.success)
        if callback is not None:
            callback(result.error, result.success)
        return result

    def watch(self, *args: Any, **kwargs: Any) -> None:
        """Sync/watch no soportado por S3."""
        raise StorageOperationNotSupportedError()

    sync = watch
