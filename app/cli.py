import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sheet_etl.config import get_settings
from sheet_etl.ir import ExtractionResult
from sheet_etl.logger import set_level
from sheet_etl.pipeline import extract_data
from sheet_etl.profile_loader import SheetProfileLookup


def load_mappings(path: Path) -> List[Dict[str, Any]]:
    """Read a SheetMapping[] JSON file; a ``{"sheets": [...]}`` wrapper is accepted too."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("sheets", [])
    if not isinstance(data, list):
        raise ValueError(f"mappings file must hold a list of sheet mappings: {path}")
    return data


def write_json_output(results: List[ExtractionResult], output_path: Path) -> str:
    output_path = output_path.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in results], f, ensure_ascii=False, indent=2, default=str)
    return str(output_path)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract mapped sheets from a workbook into normalized records."
    )
    parser.add_argument(
        "--input",
        required=True,
        help="Workbook path (.xlsx).",
    )
    parser.add_argument(
        "--mappings",
        required=True,
        help="JSON file with the sheet mappings.",
    )
    parser.add_argument(
        "--output",
        default="extraction_result.json",
        help="Output JSON path (default: extraction_result.json).",
    )
    parser.add_argument(
        "--profiles",
        default=None,
        help="Sheet layout profiles YAML (default: ETL_SHEET_PROFILES_PATH or the bundled file).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_level(logging.DEBUG if args.verbose else get_settings().ETL_LOG_LEVEL)

    input_path = Path(args.input).expanduser()
    mappings_path = Path(args.mappings).expanduser()
    if not input_path.is_file():
        print(f"[error] input not found: {args.input}")
        return 1
    if not mappings_path.is_file():
        print(f"[error] mappings not found: {args.mappings}")
        return 1

    mappings = load_mappings(mappings_path)
    profile_lookup = SheetProfileLookup(args.profiles) if args.profiles else None
    results = extract_data(str(input_path), mappings, profile_lookup=profile_lookup)

    json_path = write_json_output(results, Path(args.output).expanduser())
    print("JSON:", json_path)
    for result in results:
        stats = result.stats
        print(
            f"{result.sheet_name} → {result.target_collection or '-'}: "
            f"{stats.extracted}/{stats.total} records, {stats.errored} errors"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
