"""
===============================================================================
TARJETA CRC — domain/files.py
===============================================================================

Módulo:
    Contrato del File Record (entidad externa que el adaptador solo lee)

Responsabilidades:
    - Definir lo mínimo que el adaptador necesita de un archivo del framework:
      id, nombre (genérico o por store), colección e info por store.
    - Definir el contexto que recibe una función de key personalizada.
    - Proveer `StoredFile`, implementación simple del contrato (glue / tests).

Colaboradores:
    - infrastructure/storage/keys.py: resuelve keys a partir de estos datos.
    - Framework de archivos (externo): dueño real del ciclo de vida.

Principios:
    - Sin dependencias a boto3 ni a configuración.
    - El adaptador nunca muta un FileRecord.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol


@dataclass(frozen=True)
class StoreInfo:
    """Info que el framework guarda por store (ej: key asignada al escribir)."""

    key: Optional[str] = None
    size: Optional[int] = None
    updated_at: Optional[str] = None


class FileRecord(Protocol):
    """Lo que el adaptador lee de un archivo del framework."""

    @property
    def id(self) -> str: ...

    @property
    def collection_name(self) -> str: ...

    def name(self, store: str | None = None) -> Optional[str]:
        """Nombre genérico, o el nombre específico del store si se pide."""
        ...

    def get_info(self, store: str) -> Optional[StoreInfo]: ...


@dataclass(frozen=True)
class KeyContext:
    """Contexto que recibe una función de key personalizada."""

    store_name: str
    info: Optional[StoreInfo] = None


FileKeyFunction = Callable[[FileRecord, KeyContext], str]


@dataclass
class StoredFile:
    """
    Implementación concreta de FileRecord.

    Nota:
      - `names` guarda nombres por store; `infos` la info por store.
      - `record_key()` es lo que haría el framework después de un write.
    """

    id: str
    collection_name: str
    original_name: Optional[str] = None
    names: Dict[str, str] = field(default_factory=dict)
    infos: Dict[str, StoreInfo] = field(default_factory=dict)

    def name(self, store: str | None = None) -> Optional[str]:
        if store is None:
            return self.original_name
        return self.names.get(store)

    def get_info(self, store: str) -> Optional[StoreInfo]:
        return self.infos.get(store)

    def record_key(self, store: str, key: str) -> None:
        """Registra la key asignada por un store (la hace estable)."""
        previous = self.infos.get(store) or StoreInfo()
        self.infos[store] = StoreInfo(
            key=key, size=previous.size, updated_at=previous.updated_at
        )
