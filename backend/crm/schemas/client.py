"""
Pydantic schemas for clients
Project: Interior CRM
"""

import datetime
import re
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalizes a phone number.

    Removes spaces and dashes; accepts an optional leading + followed
    by digits only.

    Raises:
        ValueError: If the format is not valid
    """
    if phone is None:
        return None

    normalized = phone.strip().replace(" ", "").replace("-", "")
    if not normalized:
        return None

    if not re.match(r"^\+?\d+$", normalized):
        raise ValueError("Invalid phone number")

    return normalized


class ClientBase(BaseModel):
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    project_location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone(v)


class ClientCreate(ClientBase):
    name: str = Field(..., min_length=1, max_length=255, description="Client name")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Client name is required")
        return v


class ClientUpdate(ClientBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Client name cannot be empty")
        return v


class ClientRead(ClientBase):
    id: uuid.UUID
    company_id: uuid.UUID
    name: str
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        # stored values are returned as they are
        return v
