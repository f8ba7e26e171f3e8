# poolwatch/core/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, List, Optional, Union

from pydantic import Field, AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 환경 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # =========================================================
    # 1. 프로젝트 기본 정보
    # =========================================================
    PROJECT_NAME: str = Field(
        default="PoolWatch API", description="Swagger UI 등에 표시될 프로젝트 이름"
    )
    API_V1_STR: str = Field(default="/api/v1", description="API 버전 Prefix")

    APP_ENV: Literal["local", "dev", "test", "prod"] = Field(
        default="local",
        description="애플리케이션 실행 환경 (local/dev/test/prod)",
    )

    # =========================================================
    # 2. 보안 / CORS
    # =========================================================
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = Field(
        default=[], description="CORS 허용 도메인 목록 (비어있으면 전체 허용)"
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        """문자열로 들어온 CORS 설정을 리스트로 변환"""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # =========================================================
    # 3. 데이터베이스 (Key-Value 저장소) / 인프라
    # =========================================================
    DB_URL: str = Field(
        default="sqlite:///./.data/poolwatch.db",
        description="SQLAlchemy DB URL (kv_store / report_job 테이블)",
    )

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis / RQ 연결 URL",
    )

    REPORTS_USE_RQ: bool = Field(
        default=False,
        description="True면 리포트 생성을 RQ 워커로 보냄 (워커 없으면 in-process)",
    )
    REPORT_QUEUE: str = Field(default="reports", description="리포트 RQ 큐 이름")
    WORKER_QUEUES: str = Field(
        default="",
        description="워커가 들을 큐 (쉼표 구분, 비어 있으면 REPORT_QUEUE)",
    )
    WORKER_BURST: bool = Field(default=False, description="큐가 비면 워커 종료")
    WORKER_WITH_SCHEDULER: bool = Field(default=True)

    # =========================================================
    # 4. 풀 구성
    # =========================================================
    UNIT_COUNT: int = Field(default=20, description="관리 대상 유닛(방갈로) 수")
    POOL_VOLUME_GAL: int = Field(default=500, description="유닛당 수량 (gallons)")
    SITE_TITLE: str = Field(
        default="Florida Pool & Spa Monitoring",
        description="리포트 / CLI 헤더 타이틀",
    )

    # =========================================================
    # 5. 클라이언트 (원격 저장소 + 로컬 미러)
    # =========================================================
    REMOTE_BASE_URL: str = Field(
        default="http://127.0.0.1:8000/api/v1",
        description="원격 Key-Value 서버 Base URL",
    )
    REMOTE_TOKEN: Optional[str] = Field(
        default=None, description="원격 서버 Bearer 토큰 (없으면 헤더 생략)"
    )
    REMOTE_TIMEOUT_S: float = Field(default=10.0, description="원격 호출 timeout (초)")

    MIRROR_DIR: str = Field(
        default=".data/mirror",
        description="로컬 미러(JSON) 저장 디렉터리",
    )
    SAVE_DEBOUNCE_S: float = Field(
        default=0.5,
        description="편집 후 원격 저장까지 대기 시간 (연속 편집은 하나로 합쳐짐)",
    )

    # =========================================================
    # 6. 리포트 및 에셋 경로
    # =========================================================
    REPORT_DIR: str = Field(
        default="reports/outputs",
        description="PDF 리포트 출력 디렉터리 (상대/절대 경로 모두 허용)",
    )

    BRAND_PRIMARY: str = Field(
        default="#0e7490",
        description="리포트 기본 포인트 컬러 (hex)",
    )

    FONT_PATH: str = Field(
        default="./assets/fonts/NotoSans-Regular.ttf",
        description="리포트 렌더링에 사용할 TTF 폰트 경로",
    )

    # =========================================================
    # 7. Path 편의 프로퍼티
    # =========================================================

    @property
    def REPORT_DIR_ABS(self) -> str:
        """리포트 출력 디렉터리 절대 경로 (str)."""
        return str(Path(self.REPORT_DIR).resolve())

    @property
    def mirror_dir_path(self) -> Path:
        return Path(self.MIRROR_DIR).resolve()

    @property
    def font_path(self) -> Path:
        """폰트 파일 절대 경로 (Path 객체)."""
        return Path(self.FONT_PATH).resolve()


@lru_cache
def get_settings() -> Settings:
    """FastAPI Depends용 싱글톤 Settings 인스턴스."""
    return Settings()


# 전역 설정 객체
settings = get_settings()
