"""Dashboard data layer (no presentation)"""
from .client import ApiError, BooksApiClient
from .realtime import BookChangeFeed
from .session import DashboardSession, NotSignedInError, create_public_client
from .state import BookDashboard

__all__ = [
    "ApiError",
    "BooksApiClient",
    "BookChangeFeed",
    "BookDashboard",
    "DashboardSession",
    "NotSignedInError",
    "create_public_client",
]
