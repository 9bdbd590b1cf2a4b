"""Summary counters derived from the dashboard collections."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from app.api.schemas.dashboard import (
    DashboardInvoice,
    DashboardProject,
    DashboardStats,
    DashboardTask,
)


def calculate_stats(
    projects: Sequence[DashboardProject],
    tasks: Sequence[DashboardTask],
    invoices: Iterable[DashboardInvoice],
) -> DashboardStats:
    invoices = list(invoices)
    return DashboardStats(
        total_projects=len(projects),
        active_projects=sum(1 for project in projects if project.status == "active"),
        total_tasks=len(tasks),
        completed_tasks=sum(1 for task in tasks if task.status == "done"),
        total_revenue=sum((invoice.amount for invoice in invoices if invoice.status == "paid"), Decimal("0")),
        pending_invoices=sum(1 for invoice in invoices if invoice.status == "sent"),
    )
