from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import AsyncClient
from loguru import logger

from .schemas import User

# Bearer Token Scheme mainly for Swagger UI
# auto_error=False: 누락된 토큰은 require_bearer_token 에서 401로 응답
oauth2_scheme = HTTPBearer(auto_error=False)


def get_supabase_client(request: Request) -> AsyncClient:
    """
    Dependency to get the shared Supabase client (SERVICE_ROLE_KEY).

    서비스 롤 키는 RLS를 우회하므로, 모든 조회/수정은 user_id로 직접 필터링해야 합니다.
    """
    if not getattr(request.app.state, "supabase", None):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Supabase client not initialized"
        )
    return request.app.state.supabase


def require_bearer_token(
    token: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
) -> HTTPAuthorizationCredentials:
    """Missing, empty or non-Bearer Authorization header -> 401"""
    if token is None or not token.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


async def verify_current_user(
    token: HTTPAuthorizationCredentials = Depends(require_bearer_token),
    client: AsyncClient = Depends(get_supabase_client)
) -> User:
    """
    Verify the JWT token with Supabase Auth.
    Returns the User object if valid, raises 401 otherwise.

    No caching: every request is re-validated against the provider.
    """
    try:
        # client.auth.get_user(token) verifies signature, expiry, and revocation
        response = await client.auth.get_user(token.credentials)

        if not response or not response.user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        supabase_user = response.user

        return User(
            id=str(supabase_user.id),
            aud=supabase_user.aud or "authenticated",
            role=supabase_user.role or "authenticated",
            email=supabase_user.email,
            email_confirmed_at=supabase_user.email_confirmed_at,
            phone=supabase_user.phone,
            confirmed_at=supabase_user.confirmed_at,
            last_sign_in_at=supabase_user.last_sign_in_at,
            app_metadata=supabase_user.app_metadata or {},
            user_metadata=supabase_user.user_metadata or {},
            created_at=supabase_user.created_at,
            updated_at=supabase_user.updated_at,
        )

    except HTTPException:
        raise
    except Exception as e:
        # Security: log error type only, not full message (may contain sensitive info)
        logger.error(f"Token verification failed: {type(e).__name__}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
