"""
===============================================================================
CRC CARD — infrastructure/storage/keys.py
===============================================================================

Función:
  resolve_file_key(file_record, store_name, *, key_function=None)

Responsabilidades:
  - Calcular la key (relativa al folder) donde vive un archivo en un store.

Política (en orden):
  1) Key ya registrada para el store -> se devuelve tal cual (estable).
  2) Función de key configurada -> se usa su resultado sin validar.
  3) Convención "<colección>/<id>-<nombre>", nombre del store o genérico.

Colaboradores:
  - domain.files (FileRecord, KeyContext, FileKeyFunction)
  - infrastructure/storage/s3_store.py (S3Store.file_key)
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from ...domain.files import FileKeyFunction, FileRecord, KeyContext


def resolve_file_key(
    file_record: FileRecord,
    store_name: str,
    *,
    key_function: Optional[FileKeyFunction] = None,
) -> str:
    """Resuelve la key del archivo para el store (función pura)."""
    info = file_record.get_info(store_name)
    if info is not None and info.key:
        return info.key

    if key_function is not None:
        return key_function(file_record, KeyContext(store_name=store_name, info=info))

    filename = file_record.name(store=store_name) or file_record.name()
    return f"{file_record.collection_name}/{file_record.id}-{filename}"
