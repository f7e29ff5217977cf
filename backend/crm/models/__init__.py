"""
SQLAlchemy database models
Project: Interior CRM

Central import of every model, for metadata creation and generic usage.

Models:
- Company: Tenant (firm issuing the documents)
- Client: Customer of a company
- Package / PackageItem: Priced templates (BHK type x tier)
- Quotation / QuotationItem / QuotationColumnConfig: Priced proposals
- Bill: Tax invoice generated from a quotation
- Receipt: Payment received against a quotation
- DocumentSequence: Per company/month document counters
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for every SQLAlchemy model."""
    pass


from crm.models.company import Company
from crm.models.client import Client
from crm.models.package import Package, PackageItem
from crm.models.quotation import Quotation, QuotationItem, QuotationColumnConfig
from crm.models.bill import Bill
from crm.models.receipt import Receipt
from crm.models.sequence import DocumentSequence

__all__ = [
    "Base",
    "Company",
    "Client",
    "Package",
    "PackageItem",
    "Quotation",
    "QuotationItem",
    "QuotationColumnConfig",
    "Bill",
    "Receipt",
    "DocumentSequence",
]
