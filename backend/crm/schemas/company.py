"""
Pydantic schemas for companies and the tenant context
Project: Interior CRM
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyRead(BaseModel):
    id: uuid.UUID
    name: str
    code: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    gst_number: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class CompanyUpdate(BaseModel):
    """Editable company details; the code is fixed once documents exist."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    gst_number: Optional[str] = Field(None, max_length=20)


class CompanySelect(BaseModel):
    company_id: uuid.UUID


class TenantRead(BaseModel):
    """
    Selected company. Clients send company_id back in the X-Company-Id
    header on every subsequent request.
    """

    company_id: uuid.UUID
    company_code: str
    company_name: str
