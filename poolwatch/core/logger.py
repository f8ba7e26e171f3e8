# poolwatch/core/logger.py
import sys
from pathlib import Path
from loguru import logger

# 로그 저장 경로: 실행 위치 기준 .logs/poolwatch.log
LOG_DIR = Path.cwd() / ".logs"
LOG_FILE = LOG_DIR / "poolwatch.log"


def setup_logging(level: str = "INFO") -> str:
    """
    Loguru 로그 설정 초기화.
    - Console: level 이상 (기본 INFO)
    - File: DEBUG 이상, 자정 회전 / 10일 보관 / zip 압축
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    # 기존 핸들러 제거 (중복 방지)
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    )

    # enqueue=True: 저장 워커 스레드 / API 스레드에서 동시에 기록
    logger.add(
        str(LOG_FILE),
        rotation="00:00",
        retention="10 days",
        compression="zip",
        level="DEBUG",
        enqueue=True,
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"
    )

    return str(LOG_FILE)
