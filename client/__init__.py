"""
Dashboard Client Module
Data access for the dashboard: REST API with local cache fallback
"""

from .api_client import FinanceApiClient, UNAVAILABLE
from .local_cache import LocalCache
from .reconcile import merge_transactions
from .data_service import DataService
from .poller import RefreshPoller
from .session import DashboardSession, DashboardStats

__all__ = [
    "FinanceApiClient",
    "UNAVAILABLE",
    "LocalCache",
    "merge_transactions",
    "DataService",
    "RefreshPoller",
    "DashboardSession",
    "DashboardStats"
]
