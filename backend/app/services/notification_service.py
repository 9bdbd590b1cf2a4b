"""Notification inbox operations for the signed-in user."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.store.base import Query, RecordStore

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = (
    "leave_approved",
    "leave_rejected",
    "leave_request",
    "project_update",
    "task_assigned",
    "task_completed",
    "invoice_sent",
    "invoice_paid",
    "general",
)

INBOX_LIMIT = 50

INBOX_QUERY = Query(
    table="notifications",
    columns=("id", "user_id", "type", "title", "message", "data", "read", "read_at", "created_at", "updated_at"),
    limit=INBOX_LIMIT,
)


@dataclass
class Inbox:
    items: List[Dict[str, Any]] = field(default_factory=list)
    unread_count: int = 0


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def list_notifications(store: RecordStore, user_id: str, *, limit: int = INBOX_LIMIT) -> Inbox:
    rows = await store.select(replace(INBOX_QUERY, filters={"user_id": user_id}, limit=limit))
    return Inbox(items=rows, unread_count=sum(1 for row in rows if not row.get("read")))


async def mark_notification_read(store: RecordStore, notification_id: str, *, user_id: Optional[str]) -> bool:
    """Set the read flag of one notification; False when nothing matched."""
    filters: Dict[str, Any] = {"id": notification_id}
    if user_id is not None:
        filters["user_id"] = user_id
    now = _now()
    rows = await store.update("notifications", {"read": True, "read_at": now, "updated_at": now}, filters)
    if not rows:
        logger.info("Notification %s not found for user %s", notification_id, user_id)
    return bool(rows)


async def mark_all_read(store: RecordStore, user_id: str) -> int:
    now = _now()
    rows = await store.update(
        "notifications",
        {"read": True, "read_at": now, "updated_at": now},
        {"user_id": user_id, "read": False},
    )
    return len(rows)


async def delete_notification(store: RecordStore, notification_id: str, user_id: str) -> bool:
    deleted = await store.delete("notifications", {"id": notification_id, "user_id": user_id})
    return deleted > 0


async def clear_notifications(store: RecordStore, user_id: str) -> int:
    return await store.delete("notifications", {"user_id": user_id})


async def create_notification(
    store: RecordStore,
    *,
    user_id: str,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type {type!r}")
    now = _now()
    row = await store.insert(
        "notifications",
        {
            "user_id": user_id,
            "type": type,
            "title": title,
            "message": message,
            "data": data or {},
            "read": False,
            "created_at": now,
            "updated_at": now,
        },
    )
    logger.info("Created %s notification %s for user %s", type, row.get("id"), user_id)
    return row
