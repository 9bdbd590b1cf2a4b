from app.db.base import Base
from app.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_dashboard_tables() -> None:
    table_names = set(Base.metadata.tables.keys())
    expected = {
        "users",
        "companies",
        "services",
        "projects",
        "tasks",
        "task_assignees",
        "task_timers",
        "invoices",
        "notifications",
    }

    assert expected.issubset(table_names)


def test_invoice_amount_is_exact_numeric() -> None:
    amount = Base.metadata.tables["invoices"].c.amount

    assert amount.type.impl.precision == 12
    assert amount.type.impl.scale == 2
