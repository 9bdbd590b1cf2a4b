"""Notification inbox routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.api.schemas.notifications import (
    NotificationActionResponse,
    NotificationCreateRequest,
    NotificationItem,
    NotificationListResponse,
)
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services import notification_service
from app.store.base import CurrentUser, RecordStore, StoreError
from app.store.deps import get_store

router = APIRouter()


async def _require_user(store: RecordStore) -> CurrentUser:
    try:
        user = await store.get_current_user()
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def _store_failure(exc: StoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)


@router.get("/notifications", response_model=NotificationListResponse, tags=["notifications"])
async def list_notifications(
    request: Request,
    limit: int = Query(notification_service.INBOX_LIMIT, ge=1, le=200),
    store: RecordStore = Depends(get_store),
) -> NotificationListResponse:
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace("notifications.list", metadata={"limit": limit}, user_id=user.id, request_id=request_id):
        try:
            inbox = await notification_service.list_notifications(store, user.id, limit=limit)
        except StoreError as exc:
            raise _store_failure(exc) from exc

    log_metric("notifications.list.unread", inbox.unread_count, metadata={"user_id": user.id})
    return NotificationListResponse(
        notifications=[NotificationItem.model_validate(item) for item in inbox.items],
        unread_count=inbox.unread_count,
        request_id=request_id or "",
    )


@router.post(
    "/notifications",
    response_model=NotificationItem,
    status_code=status.HTTP_201_CREATED,
    tags=["notifications"],
)
async def create_notification(
    request: Request,
    payload: NotificationCreateRequest,
    store: RecordStore = Depends(get_store),
) -> NotificationItem:
    """Notify ``payload.user_id`` on behalf of the signed-in caller.

    Any signed-in user may notify any other user (task assignment, invoice and
    leave events are raised by the acting user for the recipient). The caller
    is always stamped into ``data.sender_id`` and cannot be overridden.
    """
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace("notifications.create", metadata={"type": payload.type}, user_id=user.id, request_id=request_id):
        try:
            row = await notification_service.create_notification(
                store,
                user_id=payload.user_id,
                type=payload.type,
                title=payload.title,
                message=payload.message,
                data={**payload.data, "sender_id": user.id},
            )
        except StoreError as exc:
            raise _store_failure(exc) from exc

    log_metric("notifications.created", 1, metadata={"type": payload.type})
    return NotificationItem.model_validate(row)


@router.post("/notifications/read-all", response_model=NotificationActionResponse, tags=["notifications"])
async def mark_all_notifications_read(
    request: Request,
    store: RecordStore = Depends(get_store),
) -> NotificationActionResponse:
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace("notifications.read_all", user_id=user.id, request_id=request_id):
        try:
            count = await notification_service.mark_all_read(store, user.id)
        except StoreError as exc:
            raise _store_failure(exc) from exc
    return NotificationActionResponse(status="updated", affected=count, request_id=request_id or "")


@router.post(
    "/notifications/{notification_id}/read",
    response_model=NotificationActionResponse,
    tags=["notifications"],
)
async def mark_notification_read(
    notification_id: str,
    request: Request,
    store: RecordStore = Depends(get_store),
) -> NotificationActionResponse:
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace(
        "notifications.read",
        metadata={"notification_id": notification_id},
        user_id=user.id,
        request_id=request_id,
    ):
        try:
            updated = await notification_service.mark_notification_read(store, notification_id, user_id=user.id)
        except StoreError as exc:
            raise _store_failure(exc) from exc

    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return NotificationActionResponse(status="updated", affected=1, request_id=request_id or "")


@router.delete(
    "/notifications/{notification_id}",
    response_model=NotificationActionResponse,
    tags=["notifications"],
)
async def delete_notification(
    notification_id: str,
    request: Request,
    store: RecordStore = Depends(get_store),
) -> NotificationActionResponse:
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace(
        "notifications.delete",
        metadata={"notification_id": notification_id},
        user_id=user.id,
        request_id=request_id,
    ):
        try:
            deleted = await notification_service.delete_notification(store, notification_id, user.id)
        except StoreError as exc:
            raise _store_failure(exc) from exc

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return NotificationActionResponse(status="deleted", affected=1, request_id=request_id or "")


@router.delete("/notifications", response_model=NotificationActionResponse, tags=["notifications"])
async def clear_notifications(
    request: Request,
    store: RecordStore = Depends(get_store),
) -> NotificationActionResponse:
    request_id = getattr(request.state, "request_id", None)
    user = await _require_user(store)
    with trace("notifications.clear", user_id=user.id, request_id=request_id):
        try:
            count = await notification_service.clear_notifications(store, user.id)
        except StoreError as exc:
            raise _store_failure(exc) from exc
    return NotificationActionResponse(status="deleted", affected=count, request_id=request_id or "")
