"""설정 관리"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Supabase
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
    # 서버 전용 (클라이언트로 절대 노출하지 않음)
    SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    BOOKS_TABLE = os.getenv("BOOKS_TABLE", "books")

    # PUT /api/books/{id} 는 기존 동작대로 id만으로 필터링한다.
    # true 로 설정하면 Bearer 토큰을 요구하고 소유자 필터를 추가한다.
    STATUS_UPDATE_OWNER_SCOPED = _env_flag("STATUS_UPDATE_OWNER_SCOPED")

    # 로깅
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # 대시보드
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080")
    AUTH_REDIRECT_URL = os.getenv("AUTH_REDIRECT_URL")

    # CORS 설정
    ALLOWED_ORIGINS = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:8000,http://localhost:3000"
    ).split(",")

config = Config()
