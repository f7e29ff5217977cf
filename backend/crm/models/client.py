"""
SQLAlchemy model for clients
Project: Interior CRM
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm.models import Base
from crm.models.mixins import CompanyOwnedMixin, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from crm.models.company import Company
    from crm.models.quotation import Quotation


class Client(Base, UUIDMixin, TimestampMixin, CompanyOwnedMixin):
    """
    Customer of a company, owner of one or more projects.

    A client cannot be deleted while a quotation references it.

    Attributes:
        company_id: Owning company
        name: Client name (required)
        address: Postal address
        phone: Phone number, also used for sharing documents
        email: Email address
        project_location: Site of the project
        notes: Free notes

    Relationships:
        company: Owning company
        quotations: Quotations issued to the client
    """

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Client name",
    )

    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project_location: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Project site",
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    company: Mapped["Company"] = relationship(
        "Company",
        back_populates="clients",
        lazy="noload",
    )

    quotations: Mapped[List["Quotation"]] = relationship(
        "Quotation",
        back_populates="client",
        lazy="noload",
        doc="Quotations issued to the client",
    )

    __table_args__ = (
        Index("ix_clients_company_name", "company_id", "name"),
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name!r})>"
