"""
===============================================================================
CRC CARD — infrastructure/storage/errors.py
===============================================================================

Componente:
  Errores tipados del adaptador S3

Responsabilidades:
  - Definir el lenguaje común de fallas del adaptador.
  - Evitar que excepciones de boto3/botocore se filtren desde el path de lectura.
  - Distinguir configuración inválida, lectura terminal y operación no soportada.

Colaboradores:
  - infrastructure/storage/config.py (configuración)
  - infrastructure/storage/read_stream.py (lectura terminal)
  - infrastructure/storage/s3_store.py (watch/sync)

Nota:
  - Write y remove NO usan estos errores: el error del backend se propaga tal cual.
===============================================================================
"""


class StorageError(Exception):
    """Base de errores del adaptador de storage."""


class StorageConfigurationError(StorageError):
    """Configuración inválida o incompleta (bucket, credenciales, type name)."""


class StorageReadError(StorageError):
    """Lectura fallida sin más reintentos (key y bucket en el mensaje)."""

    def __init__(self, key: str, bucket: str, *, attempts: int = 0):
        super().__init__(f"Failed to download file {key} from S3 bucket {bucket}")
        self.key = key
        self.bucket = bucket
        self.attempts = attempts


class StorageOperationNotSupportedError(StorageError, NotImplementedError):
    """Operación que el adaptador no implementa (watch/sync)."""

    def __init__(self, message: str = "S3 storage adapter does not support the sync option"):
        super().__init__(message)
