"""
추출기 기반 모듈 (Base Sheet Extractor Module)
=============================================

모든 시트 추출기의 공통 인터페이스와 시트 단위 오류 격리.
"""

from abc import ABC, abstractmethod

from sheet_etl.ir import ExtractionResult, SheetMapping
from sheet_etl.logger import get_logger

logger = get_logger(__name__)


class BaseSheetExtractor(ABC):
    """
    시트 추출기 추상 기반 클래스.

    제공 인터페이스:
    - extract(): 추상 메서드, 하위 클래스가 구현
    - safe_extract(): 예외를 잡아 시트 단위 실패 결과로 바꾸는 래퍼
    """

    @abstractmethod
    def extract(self, file_path: str, mapping: SheetMapping) -> ExtractionResult:
        """
        시트 하나를 추출한다.

        예외:
            Exception: 시트 준비/파싱 실패 시 (safe_extract 가 처리)
        """

    def safe_extract(self, file_path: str, mapping: SheetMapping) -> ExtractionResult:
        """
        안전 추출: 어떤 예외도 파이프라인 전체를 멈추지 않는다.

        실패 시 레코드 0건, 에러 1건(예외 메시지), stats.errored=1 인 결과를 반환한다.
        """
        try:
            return self.extract(file_path, mapping)
        except Exception as e:
            logger.error("Extraction failed for sheet '%s': %s", mapping.sheet_name, e, exc_info=True)
            return ExtractionResult.failed(mapping, str(e))
