from contextlib import asynccontextmanager
from typing import AsyncIterator
from fastapi import FastAPI
from supabase import create_async_client, AsyncClient, AsyncClientOptions
from loguru import logger

from booktracker.config import config
from booktracker.logging_config import configure_logging


async def create_supabase_client() -> AsyncClient:
    """
    Supabase Client 생성 (SERVICE_ROLE_KEY 사용)

    서버 전용 클라이언트입니다. JWT 검증과 books 테이블 접근에 사용되며,
    소유자 범위 제한은 애플리케이션 코드에서 user_id 필터로 수행합니다.
    """
    if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "Supabase configuration missing. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
        )

    return await create_async_client(
        config.SUPABASE_URL,
        config.SUPABASE_SERVICE_ROLE_KEY,
        options=AsyncClientOptions(
            postgrest_client_timeout=10,
            storage_client_timeout=10,
        )
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    FastAPI Lifespan Context Manager
    애플리케이션 시작/종료 시 리소스를 관리합니다.
    """
    configure_logging(config.LOG_LEVEL)

    try:
        logger.info("Initializing Supabase Client...")
        app.state.supabase = await create_supabase_client()

        if not config.STATUS_UPDATE_OWNER_SCOPED:
            logger.warning(
                "PUT /api/books/{id} is not owner-scoped: any caller who knows a book id "
                "can change its status. Set STATUS_UPDATE_OWNER_SCOPED=true to require ownership."
            )

        yield

    except RuntimeError as e:
        logger.error(
            f"Startup failed: {e} | "
            f"SUPABASE_URL={'set' if config.SUPABASE_URL else 'MISSING'}, "
            f"SUPABASE_SERVICE_ROLE_KEY={'set' if config.SUPABASE_SERVICE_ROLE_KEY else 'MISSING'}"
        )
        raise
    finally:
        # Shutdown
        if getattr(app.state, "supabase", None):
            logger.info("Closing Supabase Client...")
            await app.state.supabase.postgrest.session.aclose()
            logger.info("Supabase Client closed successfully")
