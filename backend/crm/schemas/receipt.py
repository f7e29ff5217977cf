"""
Pydantic schemas for receipts
Project: Interior CRM
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentMode(str, Enum):
    """Accepted payment modes."""
    CASH = "Cash"
    BANK = "Bank"
    UPI = "UPI"


class ReceiptCreate(BaseModel):
    """Payload for recording a payment against a quotation."""

    quotation_id: uuid.UUID = Field(..., description="UUID of the quotation")
    date: Optional[datetime.date] = Field(None, description="Payment date (default today)")
    amount: Decimal = Field(..., gt=0, description="Amount received")
    payment_mode: PaymentMode = Field(..., description="Cash / Bank / UPI")
    transaction_reference: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class ReceiptUpdate(BaseModel):
    date: Optional[datetime.date] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_mode: Optional[PaymentMode] = None
    transaction_reference: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class ReceiptRead(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    quotation_id: uuid.UUID
    receipt_number: str
    date: datetime.date
    amount: Decimal
    payment_mode: PaymentMode
    transaction_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ReceiptListItem(ReceiptRead):
    quotation_number: Optional[str] = None
    client_name: Optional[str] = None


class ReceiptDetail(ReceiptListItem):
    """
    Receipt with the running state of its quotation: total received so
    far across every receipt and the balance against the quotation total.
    """

    quotation_total: Decimal
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    total_received: Decimal
    balance: Decimal


class QuotationReceipts(BaseModel):
    """Receipts of one quotation with their total and remaining balance."""

    receipts: list[ReceiptRead]
    total_received: Decimal
    balance: Decimal
