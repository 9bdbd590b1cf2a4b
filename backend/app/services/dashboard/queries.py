"""Reads behind the dashboard and their mapping into dashboard entities."""
from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from app.api.schemas.dashboard import (
    DashboardInvoice,
    DashboardNotification,
    DashboardProject,
    DashboardTask,
    DashboardTimer,
)
from app.services.dashboard.relations import full_name, related, related_field, to_many
from app.store.base import Embed, Query, RecordStore

logger = logging.getLogger(__name__)

TASKS_LIMIT = 20
TIMERS_LIMIT = 10
NOTIFICATIONS_LIMIT = 10

PROJECTS_QUERY = Query(
    table="projects",
    columns=("id", "name", "description", "status", "created_at", "updated_at"),
    embeds=(
        Embed("companies", ("name",), inner=True),
        Embed("services", ("name",), inner=True),
        Embed("tasks", ("id", "status")),
    ),
)

TASKS_QUERY = Query(
    table="tasks",
    columns=("id", "title", "description", "status", "priority", "due_date", "created_at"),
    embeds=(
        Embed("projects", ("name",), inner=True, embeds=(Embed("companies", ("name",), inner=True),)),
        Embed("task_assignees", (), embeds=(Embed("users", ("first_name", "last_name"), inner=True),)),
    ),
    limit=TASKS_LIMIT,
)

TIMERS_QUERY = Query(
    table="task_timers",
    columns=("id", "start_time", "end_time", "duration", "created_at"),
    embeds=(
        Embed("tasks", ("title",), inner=True, embeds=(Embed("projects", ("name",), inner=True),)),
        Embed("users", ("first_name", "last_name"), inner=True),
    ),
    limit=TIMERS_LIMIT,
)

INVOICES_QUERY = Query(
    table="invoices",
    columns=("id", "number", "status", "amount", "due_date", "created_at"),
    embeds=(
        Embed("companies", ("name",), inner=True),
        Embed("services", ("name",), inner=True),
    ),
)

NOTIFICATIONS_QUERY = Query(
    table="notifications",
    columns=("id", "user_id", "type", "title", "message", "read", "created_at"),
    limit=NOTIFICATIONS_LIMIT,
)


def parse_amount(value: Any, invoice_id: Optional[str] = None) -> Decimal:
    """Parse a currency amount from its textual form, never through float arithmetic."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invoice {invoice_id} has no amount")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invoice {invoice_id} has a non-numeric amount: {value!r}") from None


def _assignee_names(row: Mapping[str, Any]) -> List[str]:
    names: List[str] = []
    for assignment in to_many(row.get("task_assignees")):
        user = related(assignment, "users")
        if user and user.get("first_name") and user.get("last_name"):
            names.append(full_name(user))
    return names


def project_from_row(row: Mapping[str, Any]) -> DashboardProject:
    tasks = to_many(row.get("tasks"))
    return DashboardProject(
        id=str(row["id"]),
        name=row["name"],
        description=row.get("description"),
        status=row["status"],
        company_name=related_field(row, "companies"),
        service_name=related_field(row, "services"),
        task_count=len(tasks),
        completed_tasks=sum(1 for task in tasks if task.get("status") == "done"),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def task_from_row(row: Mapping[str, Any]) -> DashboardTask:
    project = related(row, "projects")
    return DashboardTask(
        id=str(row["id"]),
        title=row["title"],
        description=row.get("description"),
        status=row["status"],
        priority=row["priority"],
        project_name=related_field(row, "projects"),
        company_name=related_field(project, "companies"),
        assigned_to=_assignee_names(row),
        due_date=row.get("due_date"),
        created_at=row["created_at"],
    )


def timer_from_row(row: Mapping[str, Any]) -> DashboardTimer:
    task = related(row, "tasks")
    return DashboardTimer(
        id=str(row["id"]),
        task_title=related_field(row, "tasks", "title"),
        project_name=related_field(task, "projects"),
        user_name=full_name(related(row, "users")),
        start_time=row["start_time"],
        end_time=row.get("end_time"),
        duration=row.get("duration"),
        created_at=row["created_at"],
    )


def invoice_from_row(row: Mapping[str, Any]) -> DashboardInvoice:
    return DashboardInvoice(
        id=str(row["id"]),
        number=str(row["number"]),
        status=row["status"],
        amount=parse_amount(row.get("amount"), str(row.get("id"))),
        company_name=related_field(row, "companies"),
        service_name=related_field(row, "services"),
        due_date=row.get("due_date"),
        created_at=row["created_at"],
    )


def notification_from_row(row: Mapping[str, Any]) -> DashboardNotification:
    return DashboardNotification(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        type=row["type"],
        title=row["title"],
        message=row["message"],
        is_read=bool(row.get("read")),
        created_at=row["created_at"],
    )


async def fetch_projects(store: RecordStore) -> List[DashboardProject]:
    rows = await store.select(PROJECTS_QUERY)
    return [project_from_row(row) for row in rows]


async def fetch_tasks(store: RecordStore) -> List[DashboardTask]:
    rows = await store.select(TASKS_QUERY)
    return [task_from_row(row) for row in rows]


async def fetch_timers(store: RecordStore) -> List[DashboardTimer]:
    rows = await store.select(TIMERS_QUERY)
    return [timer_from_row(row) for row in rows]


async def fetch_invoices(store: RecordStore) -> List[DashboardInvoice]:
    rows = await store.select(INVOICES_QUERY)
    return [invoice_from_row(row) for row in rows]


async def fetch_notifications(store: RecordStore) -> List[DashboardNotification]:
    """Latest notifications of the current user; empty when nobody is signed in."""
    user = await store.get_current_user()
    if user is None:
        return []

    rows = await store.select(replace(NOTIFICATIONS_QUERY, filters={"user_id": user.id}))
    notifications = []
    for row in rows:
        if str(row.get("user_id")) != user.id:
            logger.warning("Dropping notification %s not owned by user %s", row.get("id"), user.id)
            continue
        notifications.append(notification_from_row(row))
    return notifications
