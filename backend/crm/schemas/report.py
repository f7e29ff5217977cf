"""
Pydantic schemas for reports
Project: Interior CRM
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class DashboardSummary(BaseModel):
    """
    Totals of the selected company, optionally restricted to documents
    dated inside [date_from, date_to].
    """

    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    client_count: int = Field(..., ge=0)
    quotation_count: int = Field(..., ge=0)
    bill_count: int = Field(..., ge=0)
    total_quoted: Decimal = Field(..., description="Sum of quotation grand totals")
    total_billed: Decimal = Field(..., description="Sum of bill grand totals")
    total_received: Decimal = Field(..., description="Sum of receipt amounts")
    total_outstanding: Decimal = Field(..., description="Sum of open bill balances")
