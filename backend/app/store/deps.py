"""Per-request record store construction."""
from __future__ import annotations

import logging
from typing import AsyncIterator, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.deps import get_session_factory
from app.store.base import RecordStore
from app.store.sql import SqlAlchemyStore
from app.store.supabase import create_supabase_store

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_store(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[UUID] = Header(default=None),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> AsyncIterator[RecordStore]:
    """Yield a store bound to the caller's identity and close it afterwards."""
    backend = settings.store_backend.lower()
    if backend == "supabase":
        store: RecordStore = create_supabase_store(settings, access_token=_bearer_token(authorization))
    elif backend == "sql":
        store = SqlAlchemyStore(session_factory, user_id=x_user_id)
    else:
        raise RuntimeError(f"Unknown STORE_BACKEND {settings.store_backend!r}")

    logger.debug("Opened %s store", backend)
    try:
        yield store
    finally:
        await store.aclose()
