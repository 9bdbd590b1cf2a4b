"""PopWork persistence: declarative base and the mapped dashboard tables."""

from app.db.base import Base
from app.db import models  # noqa: F401  registers every table on Base.metadata

__all__ = ["Base"]
