"""FastAPI dependencies for database access."""
from __future__ import annotations

from sqlalchemy.orm import sessionmaker


def get_session_factory() -> sessionmaker:
    """Return the application's session factory (overridden in tests)."""
    from app.db.session import SessionLocal

    return SessionLocal
