"""FastAPI 애플리케이션"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from booktracker.auth.utils import lifespan
from booktracker.config import config
from .books import router as books_router
from .routes import router

# 앱 생성
app = FastAPI(
    title="Book Tracker",
    description="개인 독서 기록 관리 API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """입력 검증 실패는 422 대신 400으로 응답"""
    logger.info(f"Invalid input for {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())},
    )


# 라우트 등록
app.include_router(router)
app.include_router(books_router, prefix="/api")
