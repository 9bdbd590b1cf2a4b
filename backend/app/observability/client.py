"""Process-wide Opik client used by dashboard traces and metrics."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

_client: Optional[Opik] = None
_client_lock = Lock()
_init_attempted = False


def _build_client(config: Settings) -> Optional[Opik]:
    if not config.opik_enabled:
        logger.debug("Opik disabled; dashboard traces and metrics are not exported.")
        return None
    if not config.opik_api_key:
        logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; skipping Opik init.")
        return None

    try:
        client = Opik(
            project_name=config.opik_project,
            workspace=config.opik_workspace,
            api_key=config.opik_api_key,
        )
    except Exception as exc:  # pragma: no cover - network/credential failure
        logger.warning("Failed to initialize Opik, tracing will be disabled: %s", exc)
        return None

    logger.info("Opik enabled (project=%s, workspace=%s).", config.opik_project, config.opik_workspace or "default")
    return client


def init_opik(config: Optional[Settings] = None) -> Optional[Opik]:
    """Create the client on first use; later calls return the cached outcome."""
    global _client, _init_attempted

    with _client_lock:
        if _init_attempted:
            return _client
        _init_attempted = True
        _client = _build_client(config or settings)
        return _client


def get_opik_client() -> Optional[Opik]:
    if _client is not None:
        return _client
    return init_opik()


def reset_opik_client() -> None:
    """Forget the cached client so the next call re-reads settings."""
    global _client, _init_attempted
    with _client_lock:
        _client = None
        _init_attempted = False
