"""ORM models exposed for metadata discovery."""
from app.db.models.company import Company, Service
from app.db.models.invoice import Invoice
from app.db.models.notification import Notification
from app.db.models.project import Project
from app.db.models.task import Task, TaskAssignee
from app.db.models.task_timer import TaskTimer
from app.db.models.user import User

__all__ = [
    "Company",
    "Invoice",
    "Notification",
    "Project",
    "Service",
    "Task",
    "TaskAssignee",
    "TaskTimer",
    "User",
]
