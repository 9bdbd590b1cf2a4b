from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.base import Base
from app.db.deps import get_session_factory
from app.db.models import (
    Company,
    Invoice,
    Notification,
    Project,
    Service,
    Task,
    TaskAssignee,
    TaskTimer,
    User,
)
from app.main import app


@pytest.fixture()
def session_factory(tmp_path):
    # File-backed so threadpool reads each get their own connection.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'popwork.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture()
def client(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "store_backend", "sql")
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def workspace(session_factory):
    """Seed two users, three projects, four tasks, a timer, two invoices and notifications."""
    base = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
    session = session_factory()
    try:
        ada = User(email="ada@popwork.test", first_name="Ada", last_name="Lovelace", created_at=base)
        bob = User(email="bob@popwork.test", first_name="Bob", last_name=None, created_at=base)
        acme = Company(name="Acme", created_at=base)
        design = Service(name="Design", created_at=base)
        session.add_all([ada, bob, acme, design])
        session.flush()

        projects = [
            Project(name="Website", status="active", company_id=acme.id, service_id=design.id, created_at=base),
            Project(
                name="Branding",
                status="completed",
                company_id=acme.id,
                service_id=design.id,
                created_at=base + timedelta(hours=1),
            ),
            Project(
                name="Mobile app",
                status="active",
                company_id=acme.id,
                service_id=design.id,
                created_at=base + timedelta(hours=2),
            ),
        ]
        session.add_all(projects)
        session.flush()

        tasks = [
            Task(project_id=projects[0].id, title="Wireframes", status="done", priority="high", created_at=base),
            Task(
                project_id=projects[0].id,
                title="Copy",
                status="done",
                priority="medium",
                created_at=base + timedelta(minutes=1),
            ),
            Task(
                project_id=projects[1].id,
                title="Logo",
                status="todo",
                priority="low",
                due_date=date(2025, 3, 1),
                created_at=base + timedelta(minutes=2),
            ),
            Task(
                project_id=projects[2].id,
                title="Store listing",
                status="in_progress",
                priority="medium",
                created_at=base + timedelta(minutes=3),
            ),
        ]
        session.add_all(tasks)
        session.flush()

        session.add_all(
            [
                TaskAssignee(task_id=tasks[0].id, user_id=ada.id),
                TaskAssignee(task_id=tasks[0].id, user_id=bob.id),
                TaskTimer(
                    task_id=tasks[0].id,
                    user_id=ada.id,
                    start_time=base,
                    end_time=base + timedelta(hours=1),
                    duration=3600,
                    created_at=base,
                ),
                Invoice(
                    number="2025-00001",
                    status="paid",
                    amount=Decimal("100.00"),
                    company_id=acme.id,
                    service_id=design.id,
                    due_date=date(2025, 1, 31),
                    created_at=base,
                ),
                Invoice(
                    number="2025-00002",
                    status="sent",
                    amount=Decimal("50.00"),
                    company_id=acme.id,
                    service_id=design.id,
                    due_date=date(2025, 2, 28),
                    created_at=base + timedelta(hours=1),
                ),
            ]
        )

        notifications = [
            Notification(
                user_id=ada.id,
                type="task_assigned",
                title="New task",
                message="Wireframes",
                read=False,
                created_at=base,
            ),
            Notification(
                user_id=ada.id,
                type="invoice_paid",
                title="Invoice paid",
                message="2025-00001",
                read=False,
                created_at=base + timedelta(minutes=5),
            ),
            Notification(
                user_id=bob.id,
                type="general",
                title="Hello Bob",
                message="Only for Bob",
                read=False,
                created_at=base,
            ),
        ]
        session.add_all(notifications)
        session.commit()

        return SimpleNamespace(
            ada_id=ada.id,
            bob_id=bob.id,
            project_ids=[project.id for project in projects],
            task_ids=[task.id for task in tasks],
            ada_notification_ids=[notifications[0].id, notifications[1].id],
            bob_notification_id=notifications[2].id,
        )
    finally:
        session.close()
