"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puerto del adaptador de storage (lo que el framework de archivos maneja)

Responsabilidades:
    - Definir el contrato que un store registrado expone al framework:
      resolver key, abrir lectura, abrir escritura, borrar, watch/sync.
    - Definir el resultado de un borrado (éxito + error del backend).

Colaboradores:
    - infrastructure/storage/s3_store.py: implementación S3.
    - infrastructure/storage/registry.py: fábricas por type name.

Reglas:
    - SOLO contratos: nada de implementación.
    - Firmas provider-agnostic.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Mapping, Optional, Protocol

from .files import FileRecord


@dataclass(frozen=True)
class RemoveResult:
    """
    Resultado de un borrado.

    success es True si y solo si error es None. El error del backend se
    conserva tal cual (sin mapear).
    """

    success: bool
    error: Optional[BaseException] = None

    @classmethod
    def from_error(cls, error: Optional[BaseException]) -> "RemoveResult":
        return cls(success=error is None, error=error)


class StorageAdapterPort(Protocol):
    """Contrato de un store del framework de archivos."""

    type_name: str
    name: str

    def file_key(self, file_record: FileRecord) -> str: ...

    def open_read_stream(
        self,
        key: str,
        *,
        tries: int | None = None,
        try_freq_ms: int | None = None,
    ) -> BinaryIO: ...

    def open_write_stream(
        self, key: str, options: Mapping[str, Any] | None = None
    ) -> BinaryIO: ...

    def remove(self, key: str, *, callback=None) -> RemoveResult: ...

    def watch(self, *args: Any, **kwargs: Any) -> None: ...
