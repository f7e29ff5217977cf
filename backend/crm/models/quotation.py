"""
SQLAlchemy models for quotations
Project: Interior CRM

Contains:
- Quotation: Priced proposal issued to a client
- QuotationItem: Rows of the quotation, grouped by room
- QuotationColumnConfig: Per quotation layout of the item table
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any, List

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models import Base
from crm.models.mixins import CompanyOwnedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from crm.models.bill import Bill
    from crm.models.client import Client
    from crm.models.package import Package
    from crm.models.receipt import Receipt


class Quotation(Base, UUIDMixin, TimestampMixin, CompanyOwnedMixin):
    """
    Quotation issued by a company to one of its clients.

    Every money column is derived by the calculator at write time and
    stored unrounded:
        grand_total = subtotal - discount_amount + cgst_amount + sgst_amount

    Attributes:
        client_id: Client receiving the quotation
        quotation_number: Generated number ({CODE}/{YY}{MM}/{SEQ})
        date: Issue date
        total_sqft: Carpet area used for sqft pricing
        rate_per_sqft: Rate used for sqft pricing
        package_id: Package the quotation started from, if any
        bedroom_count: Number of bedrooms
        bedroom_config: Ordered list of {"label": ...} room descriptors
        subtotal .. grand_total: Calculated amounts
        status: draft / confirmed / billed
        terms: Terms and conditions text
        notes: Free notes

    Relationships:
        client: Client
        package: Source package
        items: Ordered rows
        column_config: Item table layout
        bill: Bill generated from the quotation (at most one)
        receipts: Payments received
    """

    __tablename__ = "quotations"

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    quotation_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        doc="Generated quotation number",
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        default=datetime.date.today,
    )

    # ------------------------------------------------------------
    # Area pricing
    # ------------------------------------------------------------
    total_sqft: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    rate_per_sqft: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)

    package_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="SET NULL"),
        nullable=True,
    )

    bedroom_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bedroom_config: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    # ------------------------------------------------------------
    # Amounts
    # ------------------------------------------------------------
    subtotal: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    discount_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    discount_value: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    taxable_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    cgst_percent: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("9"))
    cgst_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    sgst_percent: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("9"))
    sgst_amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    total_tax: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    grand_total: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
        doc="draft / confirmed / billed",
    )

    terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    client: Mapped["Client"] = relationship(
        "Client",
        back_populates="quotations",
        lazy="noload",
    )

    package: Mapped["Package | None"] = relationship("Package", lazy="noload")

    items: Mapped[List["QuotationItem"]] = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.sort_order",
        lazy="noload",
    )

    column_config: Mapped["QuotationColumnConfig | None"] = relationship(
        "QuotationColumnConfig",
        back_populates="quotation",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="noload",
    )

    bill: Mapped["Bill | None"] = relationship(
        "Bill",
        back_populates="quotation",
        uselist=False,
        lazy="noload",
    )

    receipts: Mapped[List["Receipt"]] = relationship(
        "Receipt",
        back_populates="quotation",
        order_by="Receipt.date",
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'confirmed', 'billed')",
            name="ck_quotations_status",
        ),
        CheckConstraint(
            "discount_type IS NULL OR discount_type IN ('percentage', 'flat')",
            name="ck_quotations_discount_type",
        ),
        Index("ix_quotations_company_created", "company_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Quotation(id={self.id}, number={self.quotation_number}, status={self.status})>"


class QuotationItem(Base, UUIDMixin, TimestampMixin):
    """
    Row of a quotation.

    custom_columns holds the values of user defined columns
    (key -> text or number).
    """

    __tablename__ = "quotation_items"

    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    room_label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    material: Mapped[str | None] = mapped_column(String(255), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(255), nullable=True)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="sqft")
    quantity: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("1"))
    rate: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_columns: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    quotation: Mapped["Quotation"] = relationship(
        "Quotation",
        back_populates="items",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<QuotationItem(id={self.id}, item_name={self.item_name!r})>"


class QuotationColumnConfig(Base, UUIDMixin, TimestampMixin):
    """
    Ordered column descriptors ({key, label, visible, type}) of the item
    table of one quotation.
    """

    __tablename__ = "quotation_column_configs"

    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("quotations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    columns_config: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    quotation: Mapped["Quotation"] = relationship(
        "Quotation",
        back_populates="column_config",
        lazy="noload",
    )
