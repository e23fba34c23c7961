"""
통합 로깅 모듈 (Unified Logging Module)
=======================================

sheet_etl 전체에서 사용하는 로거 설정과 조회 인터페이스.

사용 예:
    from sheet_etl.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Extracting sheet: %s", sheet_name)
    logger.debug("Unresolved column: %s", header)
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = logging.INFO

ROOT_LOGGER_NAME = "sheet_etl"

_root_configured = False


def _configure_root_logger() -> None:
    """
    프로젝트 루트 로거에 콘솔 핸들러를 한 번만 붙인다.
    """
    global _root_configured
    if _root_configured:
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(DEFAULT_LEVEL)
    root_logger.addHandler(console_handler)
    root_logger.propagate = False

    _root_configured = True


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    이름으로 로거를 가져온다.

    인자:
        name: 보통 호출 모듈의 __name__
        level: 선택적 로그 레벨; 지정하지 않으면 루트 레벨(INFO)을 따른다
    """
    _configure_root_logger()

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: Union[int, str], logger_name: Optional[str] = None) -> None:
    """
    특정 로거 또는 프로젝트 루트 로거의 레벨을 바꾼다.

    예:
        set_level(logging.DEBUG)                      # sheet_etl 전체
        set_level("DEBUG", "sheet_etl.pipeline")      # pipeline 만
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = DEFAULT_LEVEL
    logger = logging.getLogger(logger_name or ROOT_LOGGER_NAME)
    logger.setLevel(level)
