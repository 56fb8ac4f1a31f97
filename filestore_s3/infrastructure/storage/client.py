"""
===============================================================================
CRC CARD — infrastructure/storage/client.py
===============================================================================

Función:
  build_s3_client(connection)

Responsabilidades:
  - Traducir S3ConnectionConfig a kwargs de boto3.client("s3", ...).
  - Armar botocore.config.Config (retries, addressing style, firma, timeouts).

Colaboradores:
  - boto3 / botocore (SDK, tratado como caja negra)
  - infrastructure/storage/config.S3ConnectionConfig

Decisiones de diseño:
  - Lazy import de boto3/botocore para mejorar cold start.
  - Ningún valor se interpreta: solo se reenvía.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from .config import S3ConnectionConfig
from .errors import StorageConfigurationError


def client_kwargs(connection: S3ConnectionConfig) -> dict[str, Any]:
    """kwargs para boto3.client("s3") (sin el Config de botocore)."""
    kwargs: dict[str, Any] = {
        "aws_access_key_id": connection.access_key_id,
        "aws_secret_access_key": connection.secret_access_key,
        "use_ssl": connection.ssl_enabled,
        "verify": connection.verify_ssl,
    }
    if connection.session_token:
        kwargs["aws_session_token"] = connection.session_token
    if connection.region:
        kwargs["region_name"] = connection.region
    if connection.endpoint_url:
        kwargs["endpoint_url"] = connection.endpoint_url
    if connection.api_version:
        kwargs["api_version"] = connection.api_version
    return kwargs


def botocore_config_kwargs(connection: S3ConnectionConfig) -> dict[str, Any]:
    """kwargs para botocore.config.Config."""
    kwargs: dict[str, Any] = {}
    if connection.max_retries is not None:
        # botocore cuenta el intento inicial dentro de max_attempts
        kwargs["retries"] = {
            "max_attempts": connection.max_retries + 1,
            "mode": "standard",
        }
    if connection.force_path_style:
        kwargs["s3"] = {"addressing_style": "path"}
    if connection.signature_version:
        kwargs["signature_version"] = connection.signature_version
    if connection.connect_timeout is not None:
        kwargs["connect_timeout"] = connection.connect_timeout
    if connection.read_timeout is not None:
        kwargs["read_timeout"] = connection.read_timeout
    return kwargs


def build_s3_client(connection: S3ConnectionConfig):
    """Crea el cliente boto3 S3 para la conexión dada."""
    # Lazy import para reducir costo de arranque.
    try:
        import boto3
        from botocore.config import Config
    except ImportError as exc:
        raise StorageConfigurationError("boto3 is not installed.") from exc

    return boto3.client(
        "s3",
        config=Config(**botocore_config_kwargs(connection)),
        **client_kwargs(connection),
    )
