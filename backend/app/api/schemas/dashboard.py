"""Schemas for the dashboard endpoint and loader state."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ProjectStatus = Literal["draft", "active", "completed", "archived"]
TaskStatus = Literal["todo", "in_progress", "done"]
TaskPriority = Literal["low", "medium", "high"]
InvoiceStatus = Literal["draft", "sent", "paid", "overdue"]
LoadStatus = Literal["idle", "loading", "success", "error"]


class DashboardProject(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    company_name: str
    service_name: str
    task_count: int
    completed_tasks: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class DashboardTask(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    project_name: str
    company_name: str
    assigned_to: List[str]
    due_date: Optional[date] = None
    created_at: datetime


class DashboardTimer(BaseModel):
    id: str
    task_title: str
    project_name: str
    user_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    created_at: datetime


class DashboardInvoice(BaseModel):
    id: str
    number: str
    status: InvoiceStatus
    amount: Decimal
    company_name: str
    service_name: str
    due_date: Optional[date] = None
    created_at: datetime


class DashboardNotification(BaseModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime


class DashboardStats(BaseModel):
    total_projects: int = 0
    active_projects: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    total_revenue: Decimal = Decimal("0")
    pending_invoices: int = 0


class DashboardState(BaseModel):
    """Everything a dashboard consumer renders, published as one value."""

    status: LoadStatus = "idle"
    loading: bool = False
    error: Optional[str] = None
    projects: List[DashboardProject] = Field(default_factory=list)
    tasks: List[DashboardTask] = Field(default_factory=list)
    timers: List[DashboardTimer] = Field(default_factory=list)
    invoices: List[DashboardInvoice] = Field(default_factory=list)
    notifications: List[DashboardNotification] = Field(default_factory=list)
    stats: DashboardStats = Field(default_factory=DashboardStats)


class DashboardResponse(BaseModel):
    projects: List[DashboardProject]
    tasks: List[DashboardTask]
    timers: List[DashboardTimer]
    invoices: List[DashboardInvoice]
    notifications: List[DashboardNotification]
    stats: DashboardStats
    request_id: str
