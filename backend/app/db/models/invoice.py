"""Invoice ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import Money


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        Index("ix_invoices_company_id", "company_id"),
        Index("ix_invoices_status", "status"),
        CheckConstraint("status IN ('draft', 'sent', 'paid', 'overdue')", name="ck_invoices_status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    number = Column(Text, nullable=False, unique=True)
    status = Column(String(length=50), nullable=False, default="draft", server_default=sa_text("'draft'"))
    amount = Column(Money, nullable=False)
    company_id = Column(UUID(as_uuid=True), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    company = relationship("Company")
    service = relationship("Service")
