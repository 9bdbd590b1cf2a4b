"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from app.observability import client as opik_client

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Log a metric to Opik if it is enabled."""
    client = opik_client.get_opik_client()
    if not client:
        return

    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)

    try:
        metric_trace = client.trace(name=f"metric:{name}", metadata=payload)
        metric_trace.end()
    except Exception as exc:  # pragma: no cover - exporter failure
        logger.debug("Unable to record metric %s: %s", name, exc)


@contextmanager
def timed(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[None]:
    """Record ``<name>.latency_ms`` and ``<name>.success`` or ``<name>.failure``."""
    start = perf_counter()
    try:
        yield
    except Exception:
        log_metric(f"{name}.failure", 1, metadata=metadata)
        raise
    else:
        log_metric(f"{name}.success", 1, metadata=metadata)
    finally:
        log_metric(f"{name}.latency_ms", (perf_counter() - start) * 1000, metadata=metadata)
