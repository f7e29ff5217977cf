"""
API v1 Routes
Project: Interior CRM

Version 1 of the API.
"""

from fastapi import APIRouter

from crm.api.v1 import bills, clients, companies, packages, quotations, receipts, reports

# Aggregated v1 router
api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(companies.router)
api_v1_router.include_router(clients.router)
api_v1_router.include_router(packages.router)
api_v1_router.include_router(quotations.router)
api_v1_router.include_router(bills.router)
api_v1_router.include_router(receipts.router)
api_v1_router.include_router(reports.router)

__all__ = ["api_v1_router"]
