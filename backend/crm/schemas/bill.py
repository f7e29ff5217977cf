"""
Pydantic schemas for bills
Project: Interior CRM
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from crm.schemas.receipt import ReceiptRead


class BillStatus(str, Enum):
    """Payment state of a bill, derived from the receipts."""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class BillCreate(BaseModel):
    """Payload for generating a bill from a quotation."""

    quotation_id: uuid.UUID = Field(..., description="UUID of the quotation to bill")
    date: Optional[datetime.date] = Field(None, description="Bill date (default today)")
    notes: Optional[str] = None


class BillUpdate(BaseModel):
    """Only the date and the notes of a bill are editable."""

    date: Optional[datetime.date] = None
    notes: Optional[str] = None


class BillRead(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    quotation_id: uuid.UUID
    bill_number: str
    date: datetime.date
    subtotal: Decimal
    cgst_percent: Decimal
    cgst_amount: Decimal
    sgst_percent: Decimal
    sgst_amount: Decimal
    total_tax: Decimal
    grand_total: Decimal
    paid_amount: Decimal
    balance_amount: Decimal
    status: BillStatus
    notes: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class BillListItem(BillRead):
    quotation_number: Optional[str] = None
    client_name: Optional[str] = None


class BillItemRead(BaseModel):
    """Quotation row as printed on the bill."""

    room_label: Optional[str] = None
    item_name: str
    description: Optional[str] = None
    material: Optional[str] = None
    brand: Optional[str] = None
    unit: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    remarks: Optional[str] = None
    custom_columns: Optional[dict[str, Any]] = None
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class BillDetail(BillListItem):
    """Bill with the quotation rows, the client and the receipts."""

    total_sqft: Optional[Decimal] = None
    rate_per_sqft: Optional[Decimal] = None
    bedroom_count: Optional[int] = None
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    project_location: Optional[str] = None
    items: list[BillItemRead] = Field(default_factory=list)
    receipts: list[ReceiptRead] = Field(default_factory=list)
