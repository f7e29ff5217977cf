"""
API Routes
Project: Interior CRM

Aggregation of the versioned routers.
"""

from crm.api.v1 import api_v1_router

__all__ = ["api_v1_router"]
