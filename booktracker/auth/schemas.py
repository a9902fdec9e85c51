"""Authenticated user schema."""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class User(BaseModel):
    """Supabase Auth user as seen by the API.

    Only ``id`` is used to scope data access; the rest mirrors the provider's
    user object for logging and debugging.
    """

    id: str
    aud: str = "authenticated"
    role: str = "authenticated"
    email: Optional[str] = None
    email_confirmed_at: Optional[Union[datetime, str]] = None
    phone: Optional[str] = None
    confirmed_at: Optional[Union[datetime, str]] = None
    last_sign_in_at: Optional[Union[datetime, str]] = None
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[Union[datetime, str]] = None
    updated_at: Optional[Union[datetime, str]] = None
