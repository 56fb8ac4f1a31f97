"""
===============================================================================
CRC CARD — infrastructure/storage/config.py
===============================================================================

Clases:
  S3ConnectionConfig, S3StoreConfig

Responsabilidades:
  - Representar la configuración del store como structs tipados e inmutables.
  - Normalizar el folder (prefijo de keys) una sola vez.
  - Resolver precedencia: argumento explícito > Settings (env) > error.
  - Filtrar opciones de conexión sueltas contra un allow-list documentado.

Colaboradores:
  - crosscutting.config.Settings (valores de entorno)
  - infrastructure/storage/client.py (traduce a kwargs de boto3)
  - infrastructure/storage/errors.StorageConfigurationError

Decisiones de diseño:
  - Validación fail-fast en construcción (bucket, credenciales).
  - Las claves de conexión desconocidas se descartan y se loguean.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ...crosscutting.config import Settings, get_settings
from ...crosscutting.logger import logger
from ...domain.files import FileKeyFunction
from .errors import StorageConfigurationError

DEFAULT_ACL = "private"
DEFAULT_STORE_NAME = "s3"

# Opciones de conexión aceptadas (from_options y overrides de from_settings).
# Todo lo demás se descarta (boto3 rechaza kwargs desconocidos).
SERVICE_PARAM_KEYS: frozenset[str] = frozenset(
    {
        "endpoint_url",
        "access_key_id",
        "secret_access_key",
        "session_token",
        "region",
        "max_retries",
        "ssl_enabled",
        "verify_ssl",
        "force_path_style",
        "signature_version",
        "api_version",
        "connect_timeout",
        "read_timeout",
    }
)


def normalize_folder(folder: Optional[str]) -> str:
    """
    Normaliza el prefijo de keys.

    - "" / None -> ""
    - "/uploads" -> "uploads/"
    - "uploads" -> "uploads/"
    """
    if not isinstance(folder, str) or not folder:
        return ""
    if folder.startswith("/"):
        folder = folder[1:]
    if not folder:
        return ""
    if not folder.endswith("/"):
        folder += "/"
    return folder


@dataclass(frozen=True)
class S3ConnectionConfig:
    """
    Parámetros de conexión, pasados tal cual a boto3/botocore.

    Nota:
      - endpoint_url permite MinIO u otros S3 compatibles.
      - region puede omitirse en MinIO.
    """

    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    max_retries: Optional[int] = None
    ssl_enabled: bool = True
    verify_ssl: bool = True
    force_path_style: bool = False
    signature_version: Optional[str] = None
    api_version: Optional[str] = None
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if (
            not (self.access_key_id or "").strip()
            or not (self.secret_access_key or "").strip()
        ):
            raise StorageConfigurationError(
                "S3 credentials are required (access_key_id/secret_access_key)."
            )

    @staticmethod
    def supported_options(options: Mapping[str, Any]) -> dict[str, Any]:
        """Filtra `options` contra SERVICE_PARAM_KEYS; lo descartado se loguea."""
        dropped = sorted(k for k in options if k not in SERVICE_PARAM_KEYS)
        if dropped:
            logger.warning(
                "Ignoring unsupported S3 connection options",
                extra={"options": dropped},
            )
        return {k: v for k, v in options.items() if k in SERVICE_PARAM_KEYS}

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "S3ConnectionConfig":
        """Construye desde un dict suelto, descartando claves fuera del allow-list."""
        return cls(**cls.supported_options(options))

    @classmethod
    def from_settings(
        cls, settings: Settings, **overrides: Any
    ) -> "S3ConnectionConfig":
        """
        Precedencia: override explícito (no None) > Settings > default.

        Overrides fuera de SERVICE_PARAM_KEYS se descartan (ver from_options).
        """
        values: dict[str, Any] = {
            "access_key_id": settings.s3_access_key,
            "secret_access_key": settings.s3_secret_key,
            "session_token": settings.s3_session_token or None,
            "region": settings.s3_region or None,
            "endpoint_url": settings.s3_endpoint_url or None,
            "max_retries": settings.s3_max_retries,
            "ssl_enabled": settings.s3_ssl_enabled,
            "verify_ssl": settings.s3_verify_ssl,
            "force_path_style": settings.s3_force_path_style,
            "signature_version": settings.s3_signature_version or None,
            "connect_timeout": settings.s3_connect_timeout_seconds,
            "read_timeout": settings.s3_read_timeout_seconds,
        }
        for key, value in cls.supported_options(overrides).items():
            if value is not None:
                values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class S3StoreConfig:
    """
    Configuración de un store S3 (inmutable, propiedad del adapter).

    folder se normaliza en construcción; acl por default "private".
    """

    bucket: str
    connection: S3ConnectionConfig
    name: str = DEFAULT_STORE_NAME
    folder: str = ""
    acl: str = DEFAULT_ACL
    file_key: Optional[FileKeyFunction] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        bucket = (self.bucket or "").strip()
        if not bucket:
            raise StorageConfigurationError(
                'S3 store requires the "bucket" option.'
            )
        if not (self.name or "").strip():
            raise StorageConfigurationError("S3 store requires a name.")
        object.__setattr__(self, "bucket", bucket)
        object.__setattr__(self, "folder", normalize_folder(self.folder))
        object.__setattr__(self, "acl", self.acl or DEFAULT_ACL)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        name: str | None = None,
        bucket: str | None = None,
        folder: str | None = None,
        acl: str | None = None,
        file_key: FileKeyFunction | None = None,
        **connection_overrides: Any,
    ) -> "S3StoreConfig":
        """
        Construye la config del store.

        Precedencia (por campo): argumento explícito > Settings (env) > error.
        """
        s = settings or get_settings()
        return cls(
            bucket=bucket if bucket is not None else s.s3_bucket,
            connection=S3ConnectionConfig.from_settings(s, **connection_overrides),
            name=name if name is not None else s.store_name,
            folder=folder if folder is not None else s.s3_folder,
            acl=acl if acl is not None else s.s3_acl,
            file_key=file_key,
        )

    def object_key(self, key: str) -> str:
        """Key completa dentro del bucket (folder + key)."""
        return f"{self.folder}{key}"
