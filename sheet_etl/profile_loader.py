"""
시트 프로필 로더 (Sheet Profile Loader Module)
============================================

YAML 파일에서 시트별 레이아웃 오버라이드(헤더 행 수, 헤더 시작 행, 데이터 시작 행)와
대상 컬렉션/스킵 여부를 읽고, 시트명으로 프로필을 찾는다.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from sheet_etl.ir import SheetProfile
from sheet_etl.logger import get_logger

logger = get_logger(__name__)

# 패키지에 포함된 기본 프로필
DEFAULT_PROFILES_PATH = Path(__file__).resolve().parent / "profiles" / "sheet_profiles.yaml"


class ProfileLoadError(RuntimeError):
    """프로필 파일을 읽거나 해석할 수 없을 때."""


def _ensure_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    return []


def load_sheet_profiles(profiles_path: Optional[str] = None) -> List[SheetProfile]:
    """
    YAML 파일에서 시트 프로필 목록을 읽는다.

    인자:
        profiles_path: YAML 경로; None 이면 패키지 기본 파일

    반환:
        SheetProfile 목록 (형식이 잘못된 항목은 경고 후 제외)

    예외:
        ProfileLoadError: 파일이 없거나 YAML 이 깨졌을 때
    """
    path = Path(profiles_path).expanduser() if profiles_path else DEFAULT_PROFILES_PATH
    if not path.exists():
        raise ProfileLoadError(f"sheet profiles not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ProfileLoadError(f"invalid sheet profiles YAML {path}: {e}") from e

    entries = _ensure_list(raw.get("profiles") if isinstance(raw, dict) else raw)
    profiles: List[SheetProfile] = []
    for idx, item in enumerate(entries):
        if not isinstance(item, dict):
            logger.warning("Skipping sheet profile #%d: not a mapping", idx + 1)
            continue
        try:
            profiles.append(SheetProfile.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping sheet profile #%d (%s): %s", idx + 1, item.get("namePattern"), e)
    return profiles


def find_sheet_profile(sheet_name: str, profiles: List[SheetProfile]) -> Optional[SheetProfile]:
    """
    시트명을 부분 일치로 조회한다. 더 구체적인(긴) 패턴이 먼저 매치된다.
    """
    for profile in sorted(profiles, key=lambda p: len(p.name_pattern), reverse=True):
        if profile.name_pattern and profile.name_pattern in sheet_name:
            return profile
    return None


def layout_overrides(profile: Optional[SheetProfile]) -> Dict[str, Optional[int]]:
    """파서에 넘길 헤더/데이터 경계 오버라이드."""
    if profile is None:
        return {"header_row_count": None, "header_start_row": None, "data_start_row": None}
    return {
        "header_row_count": profile.header_row_count,
        "header_start_row": profile.header_start_row,
        "data_start_row": profile.data_start_row,
    }


class SheetProfileLookup:
    """
    시트명 → 프로필 조회기. 프로필 파일은 처음 조회할 때 한 번만 읽는다.
    """

    def __init__(self, profiles_path: Optional[str] = None, profiles: Optional[List[SheetProfile]] = None):
        self._profiles_path = profiles_path
        self._profiles = profiles

    @property
    def profiles(self) -> List[SheetProfile]:
        if self._profiles is None:
            self._profiles = load_sheet_profiles(self._profiles_path)
        return self._profiles

    def __call__(self, sheet_name: str) -> Optional[SheetProfile]:
        return find_sheet_profile(sheet_name, self.profiles)
