"""
===============================================================================
TARJETA CRC — filestore_s3/container.py (Composition Root)
===============================================================================

Responsabilidades:
  - Componer el store S3 por defecto a partir de Settings.
  - Exponer el registry de stores con "storage.s3" registrado.
  - Mantener singletons con caching (lru_cache) para recursos pesados
    (cliente boto3).

Colaboradores:
  - crosscutting.config.get_settings
  - infrastructure.storage (S3Store, StoreRegistry)

Notas:
  - Este archivo NO contiene lógica de negocio.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .crosscutting.config import get_settings
from .infrastructure.storage import (
    S3Store,
    StoreRegistry,
    create_s3_store,
    default_registry,
)


@lru_cache(maxsize=1)
def get_store_registry() -> StoreRegistry:
    """Registry de stores (type name -> factory)."""
    return default_registry()


@lru_cache(maxsize=1)
def get_s3_store() -> S3Store:
    """
    Store S3 por defecto, configurado 100% desde Settings.

    Errores:
      - StorageConfigurationError si falta bucket o credenciales.
    """
    settings = get_settings()
    return create_s3_store(settings.store_name)


def reset_container() -> None:
    """Limpia singletons (tests / recarga de config)."""
    get_store_registry.cache_clear()
    get_s3_store.cache_clear()
