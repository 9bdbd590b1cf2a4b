"""Schemas for the notification inbox endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

NotificationType = Literal[
    "leave_approved",
    "leave_rejected",
    "leave_request",
    "project_update",
    "task_assigned",
    "task_completed",
    "invoice_sent",
    "invoice_paid",
    "general",
]


class NotificationItem(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class NotificationListResponse(BaseModel):
    notifications: List[NotificationItem]
    unread_count: int
    request_id: str


class NotificationCreateRequest(BaseModel):
    user_id: str
    type: NotificationType = "general"
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class NotificationActionResponse(BaseModel):
    status: str
    affected: int
    request_id: str
