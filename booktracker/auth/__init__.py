"""Authentication module for booktracker."""

from .dependencies import (
    get_supabase_client,
    oauth2_scheme,
    require_bearer_token,
    verify_current_user,
)
from .schemas import User
from .utils import create_supabase_client, lifespan

__all__ = [
    # Schemas
    "User",
    # Lifecycle
    "create_supabase_client",
    "lifespan",
    # Dependencies
    "oauth2_scheme",
    "require_bearer_token",
    "get_supabase_client",
    "verify_current_user",
]
