"""
Pydantic schemas for packages
Project: Interior CRM
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PackageTier(str, Enum):
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


# Listing order of the tiers
TIER_ORDER = {PackageTier.SILVER.value: 1, PackageTier.GOLD.value: 2, PackageTier.PLATINUM.value: 3}


class PackageItemBase(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    unit: str = Field("sqft", max_length=20)
    sq_foot: Optional[Decimal] = Field(None, ge=0)
    quantity: Decimal = Field(Decimal("1"), ge=0)
    rate: Decimal = Field(Decimal("0"), ge=0)
    amount: Optional[Decimal] = Field(None, ge=0)
    room_type: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(from_attributes=True)


class PackageItemCreate(PackageItemBase):

    @model_validator(mode="after")
    def default_amount(self) -> "PackageItemCreate":
        if self.amount is None:
            self.amount = self.quantity * self.rate
        return self


class PackageItemRead(PackageItemBase):
    id: uuid.UUID
    package_id: uuid.UUID
    amount: Decimal
    sort_order: int


class PackageBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    bhk_type: str = Field(..., min_length=1, max_length=20, description="e.g. 2BHK")
    tier: PackageTier
    base_rate_sqft: Decimal = Field(Decimal("0"), ge=0)
    description: Optional[str] = None


class PackageCreate(PackageBase):
    items: list[PackageItemCreate] = Field(default_factory=list)


class PackageUpdate(BaseModel):
    """Partial update; items are replaced as a whole when provided."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bhk_type: Optional[str] = Field(None, min_length=1, max_length=20)
    tier: Optional[PackageTier] = None
    base_rate_sqft: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    items: Optional[list[PackageItemCreate]] = None


class PackageRead(PackageBase):
    id: uuid.UUID
    company_id: uuid.UUID
    is_active: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class PackageDetail(PackageRead):
    items: list[PackageItemRead] = Field(default_factory=list)
