"""
InfoMed admin console.

Core modules for the Streamlit frontend: HTTP client, session state machine,
credential storage, route guard, validation and translation.
"""

from .api_client import APIClient, APIError
from .session import Session, SessionService, SessionStatus
from .storage import CredentialStore, FileStorage, MemoryStorage, SessionStorage
from .formatters import format_date, format_datetime, format_price, format_status

__all__ = [
    "APIClient",
    "APIError",
    "Session",
    "SessionService",
    "SessionStatus",
    "CredentialStore",
    "FileStorage",
    "MemoryStorage",
    "SessionStorage",
    "format_date",
    "format_datetime",
    "format_price",
    "format_status",
]
