"""
SQLAlchemy model for receipts
Project: Interior CRM
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models import Base
from crm.models.mixins import CompanyOwnedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from crm.models.quotation import Quotation


class Receipt(Base, UUIDMixin, TimestampMixin, CompanyOwnedMixin):
    """
    Payment received against a quotation.

    Receipts may exist before the quotation is billed; the bill picks
    them up when it is generated.
    """

    __tablename__ = "receipts"

    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    receipt_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        default=datetime.date.today,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False)

    payment_mode: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="Cash",
        doc="Cash / Bank / UPI",
    )

    transaction_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    quotation: Mapped["Quotation"] = relationship(
        "Quotation",
        back_populates="receipts",
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_receipts_amount_positive"),
        CheckConstraint(
            "payment_mode IN ('Cash', 'Bank', 'UPI')",
            name="ck_receipts_payment_mode",
        ),
    )

    def __repr__(self) -> str:
        return f"<Receipt(id={self.id}, number={self.receipt_number}, amount={self.amount})>"
