"""
중간 표현 모듈 (Intermediate Representation Module)
==================================================

스키마 매핑 → 추출 단계 사이를 오가는 핵심 데이터 구조:
ColumnMapping, SheetMapping, ParsedSheet, ExtractionResult, SheetProfile.

상위 단계가 만든 JSON(camelCase)을 그대로 읽을 수 있도록 모든 모델은 alias 를 가진다.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# 필드 매핑을 건너뛰는 sentinel
UNMAPPED_FIELD = "unmapped"

# {... 중첩 필드 ..., "_source": {"sheet": str, "row": int}}
ExtractedRecord = Dict[str, Any]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ColumnMapping(_CamelModel):
    """
    엑셀 헤더 한 개 → 저장소 필드(dot-path) 매핑.

    속성:
        excel_column: 원본 헤더 (" > " 로 이어진 다중행 헤더일 수 있음)
        firestore_field: 대상 필드 dot-path, 또는 "unmapped"
        confidence: 0~1 매핑 확신도
        transform: 적용할 정규화 함수 이름 (선택)
    """
    excel_column: str = Field(alias="excelColumn")
    firestore_field: str = Field(alias="firestoreField")
    confidence: float = Field(ge=0.0, le=1.0)
    transform: Optional[str] = None
    note: Optional[str] = None


class SheetMapping(_CamelModel):
    """물리 시트 하나에 대한 매핑."""
    sheet_name: str = Field(alias="sheetName")
    target_collection: str = Field(default="", alias="targetCollection")
    skipped: bool = False
    column_mappings: List[ColumnMapping] = Field(default_factory=list, alias="columnMappings")
    skip_reason: Optional[str] = Field(default=None, alias="skipReason")


class ParsedSheet(BaseModel):
    """헤더/데이터 경계가 결정된 시트 파싱 결과."""
    name: str
    headers: List[str]
    rows: List[Dict[str, Any]]
    raw_rows: List[List[Any]] = Field(default_factory=list)


class ExtractionStats(BaseModel):
    total: int = 0
    extracted: int = 0
    errored: int = 0


class ExtractionResult(BaseModel):
    """
    시트 하나의 추출 결과. 입력 SheetMapping 하나당 하나.

    stats.extracted 는 항상 len(records) 와 같고, stats.errored 는
    조립 중 예외가 난 행만 센다 (null 행, 가드레일 탈락 행은 제외).
    """
    sheet_name: str
    target_collection: str
    records: List[ExtractedRecord] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    stats: ExtractionStats = Field(default_factory=ExtractionStats)

    @classmethod
    def failed(cls, mapping: SheetMapping, message: str) -> "ExtractionResult":
        """시트 단위 실패 결과: 레코드 없음, 에러 1건."""
        return cls.rejected(mapping.sheet_name, mapping.target_collection, message)

    @classmethod
    def rejected(cls, sheet_name: str, target_collection: str, message: str) -> "ExtractionResult":
        """SheetMapping 을 만들 수 없을 때도 쓰는 단일 에러 결과."""
        return cls(
            sheet_name=sheet_name,
            target_collection=target_collection,
            records=[],
            errors=[message],
            stats=ExtractionStats(total=0, extracted=0, errored=1),
        )

    def to_dict(self) -> dict:
        """하위 적재 단계가 읽는 camelCase 형태로 변환한다."""
        return {
            "sheetName": self.sheet_name,
            "targetCollection": self.target_collection,
            "records": self.records,
            "errors": self.errors,
            "stats": self.stats.model_dump(),
        }


class SheetProfile(_CamelModel):
    """
    시트별 레이아웃 오버라이드.

    속성:
        name_pattern: 시트명 부분 일치 패턴
        header_row_count: 강제 헤더 행 수
        header_start_row: 헤더 시작 행 (1-based)
        data_start_row: 강제 데이터 시작 행 (1-based)
    """
    name_pattern: str = Field(alias="namePattern")
    target_collection: str = Field(default="", alias="targetCollection")
    skip: bool = False
    hint: Optional[str] = None
    header_row_count: Optional[int] = Field(default=None, alias="headerRowCount", ge=1)
    header_start_row: Optional[int] = Field(default=None, alias="headerStartRow", ge=1)
    data_start_row: Optional[int] = Field(default=None, alias="dataStartRow", ge=1)
