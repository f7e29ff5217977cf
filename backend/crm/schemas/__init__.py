"""
Pydantic schemas for the Interior CRM project

Validation of request payloads and serialization of API responses.
"""

# Re-exported for direct import
# e.g.: from crm.schemas import QuotationCreate, Breakdown

from crm.schemas.company import CompanyRead, CompanySelect, CompanyUpdate, TenantRead
from crm.schemas.client import ClientCreate, ClientRead, ClientUpdate
from crm.schemas.package import (
    PackageCreate,
    PackageDetail,
    PackageItemCreate,
    PackageItemRead,
    PackageRead,
    PackageTier,
    PackageUpdate,
)
from crm.schemas.receipt import (
    PaymentMode,
    QuotationReceipts,
    ReceiptCreate,
    ReceiptDetail,
    ReceiptListItem,
    ReceiptRead,
    ReceiptUpdate,
)
from crm.schemas.bill import (
    BillCreate,
    BillDetail,
    BillListItem,
    BillRead,
    BillStatus,
    BillUpdate,
)
from crm.schemas.quotation import (
    Breakdown,
    CalculationRequest,
    ColumnDefinition,
    DiscountType,
    QuotationCreate,
    QuotationDetail,
    QuotationItemCreate,
    QuotationItemRead,
    QuotationListItem,
    QuotationRead,
    QuotationStatus,
    QuotationUpdate,
)
from crm.schemas.report import DashboardSummary

__all__ = [
    "CompanyRead",
    "CompanySelect",
    "CompanyUpdate",
    "TenantRead",
    "ClientCreate",
    "ClientRead",
    "ClientUpdate",
    "PackageCreate",
    "PackageDetail",
    "PackageItemCreate",
    "PackageItemRead",
    "PackageRead",
    "PackageTier",
    "PackageUpdate",
    "PaymentMode",
    "QuotationReceipts",
    "ReceiptCreate",
    "ReceiptDetail",
    "ReceiptListItem",
    "ReceiptRead",
    "ReceiptUpdate",
    "BillCreate",
    "BillDetail",
    "BillListItem",
    "BillRead",
    "BillStatus",
    "BillUpdate",
    "Breakdown",
    "CalculationRequest",
    "ColumnDefinition",
    "DiscountType",
    "QuotationCreate",
    "QuotationDetail",
    "QuotationItemCreate",
    "QuotationItemRead",
    "QuotationListItem",
    "QuotationRead",
    "QuotationStatus",
    "QuotationUpdate",
    "DashboardSummary",
]
