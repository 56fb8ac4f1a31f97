"""
===============================================================================
CRC CARD — infrastructure/storage/write_stream.py
===============================================================================

Componentes:
  build_put_params() + S3WriteStream (io.RawIOBase)

Responsabilidades:
  - Normalizar las opciones del caller a parámetros de PutObject:
      * content_type -> ContentType
      * aliases / metadata (free-form) -> descartadas
      * claves fuera de PUT_PARAM_KEYS -> descartadas y logueadas
      * defaults {Bucket, Key = folder + key, ACL}; el caller gana
  - Exponer un stream escribible que sube el objeto al cerrar.

Colaboradores:
  - cliente boto3 S3 (put_object, un solo request; sin multipart)
  - tempfile.SpooledTemporaryFile (buffer RAM -> disco)
  - crosscutting.logger / crosscutting.metrics

Decisiones de diseño:
  - Sin retries en escritura: el error del backend se propaga tal cual
    desde close().
  - abort() descarta sin subir; cerrar dos veces sube una sola vez.
  - Un stream que se pierde sin close() (GC) se descarta: nunca sube datos
    parciales desde el finalizador.
===============================================================================
"""

from __future__ import annotations

import io
import tempfile
from typing import Any, Mapping, Optional

from ...crosscutting.logger import logger
from ...crosscutting.metrics import record_operation

# Spool en memoria hasta 8MB; después pasa a disco.
SPOOL_MAX_BYTES = 8 * 1024 * 1024

# Opciones del caller que se descartan sin error.
UNSUPPORTED_WRITE_OPTIONS: frozenset[str] = frozenset({"aliases", "metadata"})

# Alias "amigables" -> nombre de parámetro S3.
WRITE_OPTION_ALIASES: Mapping[str, str] = {"content_type": "ContentType"}

# Parámetros de PutObject que el caller puede pasar/overridear.
PUT_PARAM_KEYS: frozenset[str] = frozenset(
    {
        "ACL",
        "Bucket",
        "CacheControl",
        "ContentDisposition",
        "ContentEncoding",
        "ContentLanguage",
        "ContentLength",
        "ContentMD5",
        "ContentType",
        "Expires",
        "GrantFullControl",
        "GrantRead",
        "GrantReadACP",
        "GrantWriteACP",
        "Key",
        "Metadata",
        "ServerSideEncryption",
        "StorageClass",
        "WebsiteRedirectLocation",
    }
)


def build_put_params(
    key: str,
    options: Optional[Mapping[str, Any]],
    *,
    bucket: str,
    folder: str,
    default_acl: str,
) -> dict[str, Any]:
    """
    Arma los parámetros de PutObject para `folder + key`.

    No muta `options`.
    """
    caller: dict[str, Any] = {}
    aliased: dict[str, Any] = {}
    dropped: list[str] = []

    for name, value in (options or {}).items():
        if name in UNSUPPORTED_WRITE_OPTIONS:
            continue
        if name in WRITE_OPTION_ALIASES:
            aliased[WRITE_OPTION_ALIASES[name]] = value
        elif name in PUT_PARAM_KEYS:
            caller[name] = value
        else:
            dropped.append(name)

    # El alias gana sobre el nombre S3, sin importar el orden del dict.
    caller.update(aliased)

    if dropped:
        logger.warning(
            "Ignoring unsupported S3 write options",
            extra={"options": sorted(dropped), "key": key},
        )

    params: dict[str, Any] = {
        "Bucket": bucket,
        "Key": f"{folder}{key}",
        "ACL": default_acl,
    }
    params.update(caller)
    return params


class S3WriteStream(io.RawIOBase):
    """
    Stream escribible: acumula bytes y los sube con put_object al cerrar.

    Uso:
        with store.open_write_stream("a/b.txt", {"content_type": "text/plain"}) as out:
            out.write(b"hola")
    """

    def __init__(
        self,
        client: Any,
        params: Mapping[str, Any],
        *,
        spool_max_bytes: int = SPOOL_MAX_BYTES,
    ) -> None:
        super().__init__()
        self._aborted = False
        self._buffer = tempfile.SpooledTemporaryFile(max_size=spool_max_bytes)
        self._client = client
        self._params = dict(params)
        self._size = 0

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def bytes_written(self) -> int:
        return self._size

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream.")
        n = self._buffer.write(data)
        self._size += n
        return n

    def abort(self) -> None:
        """Descarta lo escrito sin subir nada."""
        self._aborted = True
        self.close()

    def close(self) -> None:
        if self.closed:
            return
        try:
            if not self._aborted:
                self._upload()
        finally:
            self._buffer.close()
            super().close()

    def __del__(self):
        # Finalizador: sin close() explícito no se sube nada.
        self._aborted = True
        if not self.closed:
            self.close()

    def __exit__(self, exc_type, exc, tb):
        # Si el bloque falló, no subir un objeto a medias.
        if exc_type is not None:
            self._aborted = True
        return super().__exit__(exc_type, exc, tb)

    def _upload(self) -> None:
        bucket = self._params["Bucket"]
        object_key = self._params["Key"]
        self._buffer.seek(0)

        try:
            self._client.put_object(Body=self._buffer, **self._params)
        except Exception:
            record_operation("write", success=False)
            logger.exception(
                "S3 write failed",
                extra={"bucket": bucket, "key": object_key, "size": self._size},
            )
            raise

        record_operation("write", success=True)
        logger.info(
            "S3 object written",
            extra={"bucket": bucket, "key": object_key, "size": self._size},
        )
