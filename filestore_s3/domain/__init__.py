"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la capa de dominio

Responsabilidades:
    - Centralizar exports para imports limpios.
    - No importar infraestructura aquí.
===============================================================================
"""

from .files import FileKeyFunction, FileRecord, KeyContext, StoredFile, StoreInfo
from .services import RemoveResult, StorageAdapterPort

__all__ = [
    "FileKeyFunction",
    "FileRecord",
    "KeyContext",
    "RemoveResult",
    "StorageAdapterPort",
    "StoredFile",
    "StoreInfo",
]
