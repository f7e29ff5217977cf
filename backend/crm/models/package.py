"""
SQLAlchemy models for pricing packages
Project: Interior CRM

Contains:
- Package: Priced template for a BHK type and tier
- PackageItem: Template rows copied into new quotations
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import List

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models import Base
from crm.models.mixins import CompanyOwnedMixin, SoftDeleteMixin, TimestampMixin, UUIDMixin


class Package(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin, CompanyOwnedMixin):
    """
    Pricing template, e.g. "2BHK Gold".

    Deleting a package only deactivates it (is_active=False) because
    quotations may still point at it.

    Attributes:
        name: Display name
        bhk_type: Flat type (1BHK, 2BHK, 3BHK, 4BHK)
        tier: Silver / Gold / Platinum
        base_rate_sqft: Rate per square foot
        description: Free description
    """

    __tablename__ = "packages"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    bhk_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Flat type (e.g. 2BHK)",
    )

    tier: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Silver / Gold / Platinum",
    )

    base_rate_sqft: Mapped[Decimal] = mapped_column(
        Numeric,
        nullable=False,
        default=Decimal("0"),
        doc="Base rate per square foot",
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    items: Mapped[List["PackageItem"]] = relationship(
        "PackageItem",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageItem.sort_order",
        lazy="noload",
    )

    __table_args__ = (
        Index("ix_packages_company_tier", "company_id", "tier"),
    )

    def __repr__(self) -> str:
        return f"<Package(id={self.id}, {self.bhk_type} {self.tier})>"


class PackageItem(Base, UUIDMixin, TimestampMixin):
    """
    Template row of a package.
    """

    __tablename__ = "package_items"

    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="sqft")
    sq_foot: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("1"))
    rate: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    amount: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=Decimal("0"))
    room_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    package: Mapped["Package"] = relationship(
        "Package",
        back_populates="items",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<PackageItem(id={self.id}, item_name={self.item_name!r})>"
