"""Database column type helpers."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON, Numeric, TypeDecorator

CENTS = Decimal("0.01")


class JSONBCompat(TypeDecorator):
    """JSONB that falls back to native JSON on dialects like SQLite (for tests)."""

    impl = JSONB
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":  # pragma: no cover - dialect specific
            return dialect.type_descriptor(JSON())
        return dialect.type_descriptor(JSONB())


class Money(TypeDecorator):
    """Currency amount stored as NUMERIC(12, 2) and always handled as Decimal cents."""

    impl = Numeric(12, 2, asdecimal=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value)).quantize(CENTS)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value)).quantize(CENTS)
