"""
설정 모듈 (Configuration Module)
================================

환경 변수와 .env 파일에서 추출 엔진 설정을 읽는다.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """
    추출 엔진 설정. 모든 값은 ETL_ 접두사 환경 변수로 덮어쓸 수 있다.

    속성:
        ETL_SHEET_PROFILES_PATH: 시트 레이아웃 프로필 YAML 경로 (없으면 내장 기본값)
        ETL_LOG_LEVEL: sheet_etl 루트 로거 레벨
        ETL_MAX_ROWS: 시트당 읽을 최대 데이터 행 수 (없으면 전체)
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    ETL_SHEET_PROFILES_PATH: Optional[str] = None
    ETL_LOG_LEVEL: str = "INFO"
    ETL_MAX_ROWS: Optional[int] = None

    @field_validator("ETL_MAX_ROWS")
    @classmethod
    def validate_max_rows(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("ETL_MAX_ROWS must be a positive integer when set.")
        return v

    @field_validator("ETL_SHEET_PROFILES_PATH")
    @classmethod
    def blank_path_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


_settings_instance = None


def get_settings() -> Settings:
    """설정 싱글턴을 반환한다."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
