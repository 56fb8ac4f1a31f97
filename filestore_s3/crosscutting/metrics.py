"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) del adaptador S3

Responsabilidades:
    - Definir contadores Prometheus de operaciones de storage.
    - Proveer funciones pequeñas y estables para registrar eventos.
    - Cuidar cardinalidad (NO keys, NO buckets, NO mensajes de error).
    - Exponer el payload de exposición (/metrics) para quien lo sirva.

Colaboradores:
    - infrastructure/storage/read_stream.py: retries y fallas terminales.
    - infrastructure/storage/s3_store.py: resultado de write/remove.
===============================================================================
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

# Registro propio: no contaminar el REGISTRY global del proceso anfitrión.
_registry = CollectorRegistry()

_read_retries_total = Counter(
    "filestore_s3_read_retries_total",
    "Reintentos de lectura contra el backend S3",
    ["reason"],
    registry=_registry,
)

_read_failures_total = Counter(
    "filestore_s3_read_failures_total",
    "Lecturas que terminaron en error terminal",
    ["reason"],
    registry=_registry,
)

_operations_total = Counter(
    "filestore_s3_operations_total",
    "Operaciones de storage por resultado",
    ["operation", "status"],
    registry=_registry,
)


def record_read_retry(reason: str) -> None:
    """Cuenta un reintento de lectura (reason = código de error, baja cardinalidad)."""
    _read_retries_total.labels(reason=reason or "unknown").inc()


def record_read_failure(reason: str) -> None:
    """Cuenta una lectura fallida sin más reintentos."""
    _read_failures_total.labels(reason=reason or "unknown").inc()


def record_operation(operation: str, *, success: bool) -> None:
    """Cuenta una operación (read/write/remove) por status ok/error."""
    _operations_total.labels(
        operation=operation, status="ok" if success else "error"
    ).inc()


def get_metric_value(name: str, labels: dict[str, str] | None = None) -> float:
    """Lee el valor actual de una muestra (útil en tests y health checks)."""
    value = _registry.get_sample_value(name, labels or {})
    return float(value or 0.0)


def render_metrics() -> tuple[bytes, str]:
    """Devuelve (payload, content_type) para exponer en /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
