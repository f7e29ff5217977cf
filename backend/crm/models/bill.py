"""
SQLAlchemy model for bills
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


class Bill(Base, UUIDMixin, TimestampMixin, CompanyOwnedMixin):
    """
    Tax invoice generated from a quotation.

    The amounts are a snapshot of the quotation at conversion time:
    subtotal is the quotation taxable amount (discount already applied).
    paid_amount, balance_amount and status are kept in line with the
    receipts of the quotation.

    Attributes:
        quotation_id: Source quotation (1:1)
        bill_number: Generated number (INV/{CODE}/{YY}{MM}/{SEQ})
        date: Issue date
        subtotal: Taxable amount of the quotation
        cgst_percent, cgst_amount, sgst_percent, sgst_amount, total_tax
        grand_total: Amount due
        paid_amount: Sum of the receipts
        balance_amount: grand_total - paid_amount (negative when overpaid)
        status: pending / partial / paid
        notes: Free notes
    """

    __tablename__ = "bills"

    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
        doc="UUID of the quotation (1:1)",
    )

    bill_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        default=datetime.date.today,
    )

    subtotal: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    cgst_percent: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    cgst_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    sgst_percent: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    sgst_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    total_tax: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(Numeric, nullable=False)

    paid_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    balance_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        doc="pending / partial / paid",
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    quotation: Mapped["Quotation"] = relationship(
        "Quotation",
        back_populates="bill",
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'partial', 'paid')",
            name="ck_bills_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Bill(id={self.id}, number={self.bill_number}, status={self.status})>"
