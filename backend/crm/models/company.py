"""
SQLAlchemy model for companies
Project: Interior CRM

A company is the tenant boundary: every client, package and document
belongs to exactly one of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models import Base
from crm.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from crm.models.client import Client


class Company(Base, UUIDMixin, TimestampMixin):
    """
    Firm issuing quotations, bills and receipts.

    Attributes:
        name: Company display name
        code: Short unique code used inside document numbers (e.g. AARTI)
        address: Postal address printed on documents
        phone: Contact phone
        email: Contact email
        gst_number: GSTIN of the company
    """

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Company display name",
    )

    code: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        doc="Short code used in document numbers",
    )

    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gst_number: Mapped[str | None] = mapped_column(String(20), nullable=True)

    clients: Mapped[List["Client"]] = relationship(
        "Client",
        back_populates="company",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, code={self.code})>"
