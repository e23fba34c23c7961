import pytest

from sheet_etl.ir import SheetProfile
from sheet_etl.profile_loader import (
    ProfileLoadError,
    SheetProfileLookup,
    find_sheet_profile,
    layout_overrides,
    load_sheet_profiles,
)


def test_bundled_profiles_load():
    profiles = load_sheet_profiles()
    assert profiles

    profile = find_sheet_profile("100-2.참여율(e-나라)", profiles)
    assert profile is not None
    assert profile.target_collection == "participationEntries"
    assert layout_overrides(profile) == {"header_row_count": 1, "header_start_row": 9, "data_start_row": 10}


def test_longest_pattern_wins():
    profiles = [
        SheetProfile(namePattern="참여율", skip=True),
        SheetProfile(namePattern="100-2.참여율", headerStartRow=9),
    ]
    assert find_sheet_profile("100-2.참여율(e-나라)", profiles).header_start_row == 9
    assert find_sheet_profile("참여율 요약", profiles).skip is True
    assert find_sheet_profile("재직자명단", profiles) is None


def test_no_profile_means_no_overrides():
    assert layout_overrides(None) == {"header_row_count": None, "header_start_row": None, "data_start_row": None}


def test_invalid_entries_are_skipped(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text(
        "profiles:\n"
        "  - namePattern: 거래내역\n"
        "    targetCollection: transactions\n"
        "    headerRowCount: 2\n"
        "  - namePattern: 잘못된행\n"
        "    headerRowCount: 0\n"
        "  - just a string\n",
        encoding="utf-8",
    )

    profiles = load_sheet_profiles(str(path))
    assert [p.name_pattern for p in profiles] == ["거래내역"]
    assert profiles[0].header_row_count == 2


def test_missing_or_broken_file_raises(tmp_path):
    with pytest.raises(ProfileLoadError):
        load_sheet_profiles(str(tmp_path / "nope.yaml"))

    broken = tmp_path / "broken.yaml"
    broken.write_text("profiles: [unclosed", encoding="utf-8")
    with pytest.raises(ProfileLoadError):
        load_sheet_profiles(str(broken))


def test_lookup_loads_lazily(tmp_path):
    lookup = SheetProfileLookup(str(tmp_path / "never-read.yaml"), profiles=[SheetProfile(namePattern="거래")])
    assert lookup("2026 거래내역").name_pattern == "거래"
