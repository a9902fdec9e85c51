"""loguru 싱크 설정"""
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """기본 stderr 싱크를 설정된 레벨의 싱크로 교체"""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
