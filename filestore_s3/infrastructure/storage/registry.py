"""
===============================================================================
ARCHIVO: registry.py
===============================================================================

CRC CARD (Class)
-------------------------------------------------------------------------------
Clase:
    StoreRegistry

Responsabilidades:
    - Mantener el mapeo type name -> factory de stores.
    - Crear stores por type name (ej: "storage.s3").
    - Permitir extensión sin modificar consumidores (OCP) vía register().

Colaboradores:
    - S3Store / S3StoreConfig
    - errors.StorageConfigurationError
===============================================================================
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ...crosscutting.config import get_settings
from ...domain.services import StorageAdapterPort
from .config import S3StoreConfig
from .errors import StorageConfigurationError
from .s3_store import S3_TYPE_NAME, S3Store

StoreFactory = Callable[..., StorageAdapterPort]


def create_s3_store(
    name: str,
    *,
    client=None,
    read_tries: int | None = None,
    read_try_freq_ms: int | None = None,
    **options: Any,
) -> S3Store:
    """
    Factory de "storage.s3".

    `options` son los de S3StoreConfig.from_settings (bucket, folder, acl,
    file_key, overrides de conexión); lo no provisto sale de Settings.
    """
    settings = get_settings()
    config = S3StoreConfig.from_settings(settings, name=name, **options)
    return S3Store(
        config,
        client=client,
        read_tries=settings.read_tries if read_tries is None else read_tries,
        read_try_freq_ms=(
            settings.read_try_freq_ms if read_try_freq_ms is None else read_try_freq_ms
        ),
    )


class StoreRegistry:
    """Registry/Factory de stores por type name."""

    def __init__(self) -> None:
        self._factories: dict[str, StoreFactory] = {}

    def type_names(self) -> frozenset[str]:
        return frozenset(self._factories)

    def register(self, type_name: str, factory: StoreFactory) -> None:
        """Registrar/override de una factory."""
        normalized = (type_name or "").strip()
        if not normalized:
            raise StorageConfigurationError("type_name is required.")
        self._factories[normalized] = factory

    def create(self, type_name: str, name: str, **options: Any) -> StorageAdapterPort:
        """
        Instancia un store.

        Errores:
          - StorageConfigurationError si el type name no está registrado.
        """
        factory = self._factories.get((type_name or "").strip())
        if factory is None:
            raise StorageConfigurationError(
                f"Unknown store type: {type_name!r} "
                f"(registered: {sorted(self._factories)})"
            )
        return factory(name, **options)


def default_registry() -> StoreRegistry:
    """Registry con los stores incluidos en el paquete."""
    registry = StoreRegistry()
    registry.register(S3_TYPE_NAME, create_s3_store)
    return registry
