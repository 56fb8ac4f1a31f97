"""
===============================================================================
CRC CARD — infrastructure/storage/read_stream.py
===============================================================================

Clase:
  S3ReadStream (io.RawIOBase)

Responsabilidades:
  - Exponer un objeto S3 como stream binario legible (read/readinto/iter_chunks).
  - Abrir el backend de forma diferida (el constructor no hace red).
  - Reintentar errores transitorios con delay fijo y contador compartido por
    toda la vida del stream.
  - Reanudar desde el último byte entregado (Range + IfMatch): el consumidor
    nunca ve bytes duplicados ni mezcla dos versiones del objeto.
  - Agotados los intentos: StorageReadError (key + bucket) y stream cerrado.

Colaboradores:
  - tenacity (motor de retry: stop / wait_fixed / retry_if_exception)
  - cliente boto3 S3 (get_object)
  - crosscutting.logger / crosscutting.metrics
  - infrastructure/storage/errors.StorageReadError

Garantía:
  - El objeto completo seguido de EOF, o un error terminal. Nunca truncado
    en silencio.
===============================================================================
"""

from __future__ import annotations

import io
import time
from typing import Any, Callable, Iterator, Optional

from tenacity import RetryCallState, Retrying, retry_if_exception, wait_fixed

from ...crosscutting.logger import logger
from ...crosscutting.metrics import (
    record_operation,
    record_read_failure,
    record_read_retry,
)
from .errors import StorageError, StorageReadError

DEFAULT_TRIES = 3
DEFAULT_TRY_FREQ_MS = 1000
DEFAULT_CHUNK_SIZE = 64 * 1024

# Códigos de error que no tiene sentido reintentar.
PERMANENT_ERROR_CODES: frozenset[str] = frozenset(
    {
        "NoSuchKey",
        "NoSuchBucket",
        "NotFound",
        "404",
        "AccessDenied",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "403",
        "PreconditionFailed",
        "412",
        "InvalidRange",
        "416",
    }
)


def storage_error_code(exc: BaseException) -> str:
    """Código de error S3 (ClientError) o, si no hay, el nombre de la excepción."""
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        code = (response.get("Error") or {}).get("Code")
        if code:
            return str(code)
    return type(exc).__name__


def is_transient_storage_error(exc: BaseException) -> bool:
    """
    Decide si una falla de lectura se reintenta.

    Reglas:
      1) Solo Exception (GeneratorExit/KeyboardInterrupt nunca).
      2) Errores propios del adaptador no se reintentan.
      3) Códigos permanentes (not found, permisos, precondición) fail-fast.
      4) Todo lo demás (timeouts, conexión, 5xx, lecturas incompletas) sí.
    """
    if not isinstance(exc, Exception):
        return False
    if isinstance(exc, StorageError):
        return False
    return storage_error_code(exc) not in PERMANENT_ERROR_CODES


class S3ReadStream(io.RawIOBase):
    """Stream de lectura con retry para un objeto S3."""

    def __init__(
        self,
        client: Any,
        *,
        bucket: str,
        key: str,
        object_key: str,
        tries: int = DEFAULT_TRIES,
        try_freq_ms: int = DEFAULT_TRY_FREQ_MS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__()
        # close() puede correr desde __del__ aunque la validación falle.
        self._body: Any = None
        if not isinstance(tries, int) or tries < 1:
            raise ValueError("tries must be an integer >= 1")
        if try_freq_ms < 0:
            raise ValueError("try_freq_ms must be >= 0")
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")

        self._client = client
        self._bucket = bucket
        self._key = key
        self._object_key = object_key
        self._tries = tries
        self._chunk_size = chunk_size

        self._pending = b""
        self._position = 0
        self._etag: Optional[str] = None
        self._content_length: Optional[int] = None
        self._failures = 0
        self._eof = False

        self._retrying = Retrying(
            stop=self._tries_exhausted,
            wait=wait_fixed(try_freq_ms / 1000.0),
            retry=retry_if_exception(is_transient_storage_error),
            before_sleep=self._log_retry,
            sleep=sleep,
            reraise=True,
        )

    # =========================================================================
    # io.RawIOBase
    # =========================================================================

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")

        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0

        if not self._pending and not self._eof:
            self._pending = self._next_chunk()
        if not self._pending:
            return 0

        n = min(len(view), len(self._pending))
        view[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._discard_body()
        super().close()

    # =========================================================================
    # API pública extra
    # =========================================================================

    @property
    def key(self) -> str:
        return self._key

    @property
    def bytes_read(self) -> int:
        """Bytes recibidos del backend hasta ahora (offset de reanudación)."""
        return self._position

    @property
    def attempts_failed(self) -> int:
        return self._failures

    def iter_chunks(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """Itera el objeto en chunks hasta EOF."""
        size = chunk_size or self._chunk_size
        while True:
            chunk = self.read(size)
            if not chunk:
                return
            yield chunk

    # =========================================================================
    # Helpers privados
    # =========================================================================

    def _next_chunk(self) -> bytes:
        try:
            chunk = self._retrying(self._read_chunk)
        except Exception as exc:
            reason = storage_error_code(exc)
            record_read_failure(reason)
            record_operation("read", success=False)
            logger.error(
                "S3 read failed",
                extra={
                    "bucket": self._bucket,
                    "key": self._object_key,
                    "attempts": self._failures,
                    "bytes_read": self._position,
                    "error_type": type(exc).__name__,
                    "error_code": reason,
                },
            )
            self.close()
            raise StorageReadError(
                self._object_key, self._bucket, attempts=self._failures
            ) from exc

        if not chunk:
            self._eof = True
            self._discard_body()
            record_operation("read", success=True)
        return chunk

    def _read_chunk(self) -> bytes:
        # Falla justo después del último byte: no hay nada que re-pedir.
        if self._content_length is not None and self._position >= self._content_length:
            return b""

        if self._body is None:
            self._open()

        try:
            chunk = self._body.read(self._chunk_size)
        except Exception:
            self._failures += 1
            self._discard_body()
            raise

        self._position += len(chunk)
        return chunk

    def _open(self) -> None:
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": self._object_key}
        if self._position:
            params["Range"] = f"bytes={self._position}-"
            if self._etag:
                params["IfMatch"] = self._etag

        # Cualquier falla al abrir (request o respuesta malformada) consume un intento.
        try:
            response = self._client.get_object(**params)
            body = response["Body"]
            etag = response.get("ETag")
            content_length = response.get("ContentLength")
        except Exception:
            self._failures += 1
            raise

        if self._etag is None:
            self._etag = etag
        if self._content_length is None and not self._position:
            self._content_length = content_length
        self._body = body

    def _discard_body(self) -> None:
        body, self._body = self._body, None
        if body is None:
            return
        try:
            body.close()
        except Exception:
            # El body ya falló o quedó a medias; cerrarlo es best-effort.
            logger.debug(
                "Ignoring error closing S3 body", extra={"key": self._object_key}
            )

    def _tries_exhausted(self, retry_state: RetryCallState) -> bool:
        return self._failures >= self._tries

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        reason = storage_error_code(exc) if exc is not None else "unknown"
        wait_time = (
            retry_state.next_action.sleep
            if retry_state.next_action is not None
            else 0
        )
        record_read_retry(reason)
        logger.warning(
            "Retrying S3 read",
            extra={
                "bucket": self._bucket,
                "key": self._object_key,
                "attempt": self._failures,
                "tries": self._tries,
                "resume_from": self._position,
                "wait_seconds": round(float(wait_time), 3),
                "error_type": type(exc).__name__ if exc else None,
                "error_code": reason,
            },
        )
