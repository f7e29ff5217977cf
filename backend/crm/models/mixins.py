"""
SQLAlchemy model mixins
Project: Interior CRM

Reusable mixins adding common columns to the models.
"""

import datetime
import uuid

from sqlalchemy import Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy import event
from sqlalchemy.orm import Mapped, Session, declared_attr, mapped_column
from sqlalchemy.sql import func


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SoftDeleteMixin:
    """
    Logical deletion.

    Adds an is_active flag: False means the record was "deleted" but is
    kept because other documents may still reference it.

    Usage:
        class Package(Base, SoftDeleteMixin):
            __tablename__ = "packages"
    """

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Soft delete flag: False = deleted, True = active",
    )


class TimestampMixin:
    """
    Creation and last update timestamps, managed automatically.
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        doc="Creation timestamp",
    )

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        doc="Last update timestamp",
    )


class UUIDMixin:
    """
    UUID primary key generated on insert.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="UUID primary key",
    )


class CompanyOwnedMixin:
    """
    Tenant ownership.

    Adds the indexed company_id foreign key shared by every record that
    belongs directly to a company (clients, packages, quotations, bills,
    receipts).
    """

    @declared_attr
    def company_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            Uuid,
            ForeignKey("companies.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
            doc="UUID of the owning company",
        )


# ------------------------------------------------------------
# Event Listeners
# ------------------------------------------------------------
@event.listens_for(Session, "before_flush")
def update_timestamp(session: Session, flush_context, instances) -> None:
    """
    Refreshes updated_at on new and modified objects before every flush.

    Args:
        session: SQLAlchemy session
        flush_context: flush context
        instances: unused
    """
    now = datetime.datetime.now(datetime.timezone.utc)

    for obj in session.dirty:
        if hasattr(obj, "updated_at"):
            if session.is_modified(obj, include_collections=False):
                obj.updated_at = now

    for obj in session.new:
        if hasattr(obj, "updated_at"):
            obj.updated_at = now
