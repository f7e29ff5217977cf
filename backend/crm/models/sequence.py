"""
SQLAlchemy model for document counters
Project: Interior CRM
"""

import uuid

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm.models import Base
from crm.models.mixins import TimestampMixin, UUIDMixin


class DocumentSequence(Base, UUIDMixin, TimestampMixin):
    """
    Last issued sequence number for one company, document type and
    YYMM period.

    The row is read with SELECT ... FOR UPDATE and incremented in the
    transaction that inserts the numbered document.
    """

    __tablename__ = "document_sequences"

    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )

    document_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="quotation / bill / receipt",
    )

    period: Mapped[str] = mapped_column(
        String(4),
        nullable=False,
        doc="YYMM",
    )

    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint(
            "company_id",
            "document_type",
            "period",
            name="uq_document_sequences_company_type_period",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<DocumentSequence({self.document_type} {self.period} "
            f"last_value={self.last_value})>"
        )
