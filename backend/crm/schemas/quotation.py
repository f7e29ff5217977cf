"""
Pydantic schemas for quotations
Project: Interior CRM

Contains:
- Enums: QuotationStatus, DiscountType, ColumnType
- Schemas for items, column configuration and bedroom configuration
- Schemas for Quotation create/update/read
- CalculationRequest / Breakdown for the live totals preview
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from crm.schemas.bill import BillRead
from crm.schemas.receipt import ReceiptRead


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class QuotationStatus(str, Enum):
    """Lifecycle states of a quotation."""
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    BILLED = "billed"


class DiscountType(str, Enum):
    """Discount representations."""
    PERCENTAGE = "percentage"
    FLAT = "flat"


class ColumnType(str, Enum):
    """Value type of an item table column."""
    TEXT = "text"
    NUMBER = "number"


# Statuses a user may set; BILLED is reserved to bill generation
USER_SETTABLE_STATUSES = (QuotationStatus.DRAFT, QuotationStatus.CONFIRMED)

# Stored as JSON, hence native number types
CustomValue = Union[int, float, str]


# -------------------------------------------------------------------
# Schemas for column configuration
# -------------------------------------------------------------------

class ColumnDefinition(BaseModel):
    """One column of the item table."""

    key: str = Field(..., min_length=1, max_length=50)
    label: str = Field(..., min_length=1, max_length=100)
    visible: bool = True
    type: ColumnType = ColumnType.TEXT


class BedroomEntry(BaseModel):
    label: str = Field(..., max_length=100)


# -------------------------------------------------------------------
# Schemas for QuotationItem
# -------------------------------------------------------------------

class QuotationItemBase(BaseModel):
    """Common fields of a quotation row."""

    room_label: Optional[str] = Field(None, max_length=100)
    item_name: str = Field(..., min_length=1, max_length=255, description="Item name")
    description: Optional[str] = None
    material: Optional[str] = Field(None, max_length=255)
    brand: Optional[str] = Field(None, max_length=255)
    unit: str = Field("sqft", max_length=20)
    quantity: Decimal = Field(Decimal("1"), ge=0)
    rate: Decimal = Field(Decimal("0"), ge=0)
    amount: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Row amount; defaults to quantity x rate",
    )
    remarks: Optional[str] = None
    custom_columns: dict[str, CustomValue] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class QuotationItemCreate(QuotationItemBase):
    """Row sent on quotation create/update and calculate."""

    @model_validator(mode="after")
    def default_amount(self) -> "QuotationItemCreate":
        if self.amount is None:
            self.amount = self.quantity * self.rate
        return self


class QuotationItemRead(QuotationItemBase):
    id: uuid.UUID
    quotation_id: uuid.UUID
    amount: Decimal
    sort_order: int

    @field_validator("custom_columns", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or {}


# -------------------------------------------------------------------
# Calculation
# -------------------------------------------------------------------

class CalculationRequest(BaseModel):
    """
    Inputs of the financial calculation.

    When items are present the subtotal is their sum; otherwise
    total_sqft x rate_per_sqft.
    """

    items: list[QuotationItemCreate] = Field(default_factory=list)
    total_sqft: Optional[Decimal] = Field(None, ge=0)
    rate_per_sqft: Optional[Decimal] = Field(None, ge=0)
    discount_type: Optional[DiscountType] = None
    discount_value: Decimal = Field(Decimal("0"), ge=0)
    cgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    sgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)


class Breakdown(BaseModel):
    """Full monetary breakdown of a quotation, unrounded."""

    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    cgst_percent: Decimal
    cgst_amount: Decimal
    sgst_percent: Decimal
    sgst_amount: Decimal
    total_tax: Decimal
    grand_total: Decimal


# -------------------------------------------------------------------
# Schemas for Quotation
# -------------------------------------------------------------------

class QuotationBase(BaseModel):
    date: Optional[datetime.date] = Field(None, description="Issue date (default today)")
    total_sqft: Optional[Decimal] = Field(None, ge=0)
    rate_per_sqft: Optional[Decimal] = Field(None, ge=0)
    package_id: Optional[uuid.UUID] = None
    bedroom_count: int = Field(1, ge=0)
    bedroom_config: list[BedroomEntry] = Field(default_factory=list)
    discount_type: Optional[DiscountType] = None
    discount_value: Decimal = Field(Decimal("0"), ge=0)
    cgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    sgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    terms: Optional[str] = None
    notes: Optional[str] = None


def _check_user_status(status: Optional[QuotationStatus]) -> Optional[QuotationStatus]:
    if status is not None and status not in USER_SETTABLE_STATUSES:
        raise ValueError("Status can only be set to draft or confirmed")
    return status


class QuotationCreate(QuotationBase):
    """
    Payload for creating a quotation.

    Amounts are never accepted from the caller: they are recalculated
    from items, area and discount.
    """

    client_id: uuid.UUID
    status: QuotationStatus = QuotationStatus.DRAFT
    items: list[QuotationItemCreate] = Field(default_factory=list)
    column_config: Optional[list[ColumnDefinition]] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: QuotationStatus) -> QuotationStatus:
        return _check_user_status(v)


class QuotationUpdate(BaseModel):
    """
    Partial update. Items and column configuration are replaced as a
    whole when provided.
    """

    client_id: Optional[uuid.UUID] = None
    date: Optional[datetime.date] = None
    total_sqft: Optional[Decimal] = Field(None, ge=0)
    rate_per_sqft: Optional[Decimal] = Field(None, ge=0)
    package_id: Optional[uuid.UUID] = None
    bedroom_count: Optional[int] = Field(None, ge=0)
    bedroom_config: Optional[list[BedroomEntry]] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)
    cgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    sgst_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    status: Optional[QuotationStatus] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[list[QuotationItemCreate]] = None
    column_config: Optional[list[ColumnDefinition]] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[QuotationStatus]) -> Optional[QuotationStatus]:
        return _check_user_status(v)


class QuotationRead(BaseModel):
    """Quotation with its stored breakdown."""

    id: uuid.UUID
    company_id: uuid.UUID
    client_id: uuid.UUID
    quotation_number: str
    date: datetime.date
    total_sqft: Optional[Decimal] = None
    rate_per_sqft: Optional[Decimal] = None
    package_id: Optional[uuid.UUID] = None
    bedroom_count: int
    bedroom_config: list[BedroomEntry] = Field(default_factory=list)
    subtotal: Decimal
    discount_type: Optional[DiscountType] = None
    discount_value: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    cgst_percent: Decimal
    cgst_amount: Decimal
    sgst_percent: Decimal
    sgst_amount: Decimal
    total_tax: Decimal
    grand_total: Decimal
    status: QuotationStatus
    terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("bedroom_config", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class QuotationListItem(QuotationRead):
    client_name: Optional[str] = None


class QuotationDetail(QuotationRead):
    """Quotation with rows, layout, payments and bill."""

    client_name: Optional[str] = None
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    project_location: Optional[str] = None
    items: list[QuotationItemRead] = Field(default_factory=list)
    column_config: Optional[list[ColumnDefinition]] = None
    receipts: list[ReceiptRead] = Field(default_factory=list)
    bill: Optional[BillRead] = None
