"""
Python client for the cash drawer and treasury API.

Wraps the REST endpoints with a requests-based HTTP client and provides a
stateful cash drawer session that mirrors what a till operator does during a
shift: select a branch and date, open the drawer, refresh the expected
closing balance, then close or settle.
"""

from .cashdrawer import CashDrawerApi, CashDrawerSession
from .config import ClientConfig
from .errors import ApiConnectionError, ApiError
from .http import ApiClient
from .treasury import TreasuryApi

__all__ = [
    "ApiClient",
    "ApiConnectionError",
    "ApiError",
    "CashDrawerApi",
    "CashDrawerSession",
    "ClientConfig",
    "TreasuryApi",
]
