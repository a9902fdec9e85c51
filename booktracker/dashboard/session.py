"""대시보드 인증 세션

공개 키(ANON_KEY) 클라이언트로 로그인/회원가입/로그아웃을 처리하고,
세션 토큰을 BookDashboard에 연결합니다.
"""
from typing import Optional

from loguru import logger
from supabase import AsyncClient, create_async_client

from booktracker.books.models import ALL_STATUSES
from booktracker.config import config
from .client import BooksApiClient
from .realtime import BookChangeFeed
from .state import BookDashboard


class NotSignedInError(Exception):
    """Raised when the dashboard is started without an active session."""


async def create_public_client(
    url: Optional[str] = None, anon_key: Optional[str] = None
) -> AsyncClient:
    """브라우저 측에 해당하는 공개 키 클라이언트 생성"""
    url = url or config.SUPABASE_URL
    anon_key = anon_key or config.SUPABASE_ANON_KEY
    if not url:
        raise RuntimeError("Supabase configuration missing. Set SUPABASE_URL.")
    if not anon_key:
        raise RuntimeError("Supabase configuration missing. Set SUPABASE_ANON_KEY.")
    return await create_async_client(url, anon_key)


class DashboardSession:
    """Binds a Supabase auth session to a BookDashboard and its change feed."""

    def __init__(self, client: AsyncClient, api: Optional[BooksApiClient] = None):
        self.client = client
        self.api = api or BooksApiClient(config.API_BASE_URL)
        self.dashboard = BookDashboard(self.api)
        self.feed = BookChangeFeed(client, table=config.BOOKS_TABLE)
        self._auth_subscription = None

    async def sign_in(self, email: str, password: str):
        response = await self.client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        logger.info(f"Signed in as {response.user.id if response.user else 'unknown'}")
        return response.session

    async def sign_up(self, email: str, password: str):
        """
        Register a new account.

        Returns the new session, or None when the provider requires e-mail
        confirmation first.
        """
        credentials = {"email": email, "password": password}
        if config.AUTH_REDIRECT_URL:
            credentials["options"] = {"email_redirect_to": config.AUTH_REDIRECT_URL}

        response = await self.client.auth.sign_up(credentials)
        if response.session is None:
            logger.info("Sign-up pending e-mail confirmation")
        return response.session

    async def sign_out(self) -> None:
        await self.client.auth.sign_out()
        await self.feed.close()
        self.dashboard.clear()

    async def current_session(self):
        return await self.client.auth.get_session()

    async def start_dashboard(self, initial_filter: str = ALL_STATUSES) -> BookDashboard:
        """
        Load the signed-in user's books and keep them fresh.

        Performs the initial fetch, subscribes to table changes, and follows
        auth state changes (token refresh, sign-out).

        Raises:
            NotSignedInError: If there is no active session
        """
        session = await self.current_session()
        if session is None:
            raise NotSignedInError("No active session; sign in first")

        self.dashboard.set_session(session.access_token, str(session.user.id))
        self.dashboard.filter = initial_filter
        await self.dashboard.fetch_books(initial_filter)

        await self.feed.subscribe(self.dashboard.handle_change)
        if self._auth_subscription is None:
            self._auth_subscription = self.client.auth.on_auth_state_change(
                self._on_auth_state_change
            )
        return self.dashboard

    def _on_auth_state_change(self, event, session) -> None:
        if session is None:
            logger.info(f"Auth state changed ({event}): signed out")
            self.dashboard.clear()
            return

        self.dashboard.set_session(session.access_token, str(session.user.id))
        self.dashboard.schedule_refresh()

    async def close(self) -> None:
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None
        await self.feed.close()
        await self.api.aclose()
