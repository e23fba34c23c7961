"""
Sheet extractors.

Provides:
- BaseSheetExtractor: abstract base with per-sheet error isolation
- GenericSheetExtractor: column-mapped, one row per record
- MatrixSheetExtractor: participation matrix with repeating column groups
"""

from sheet_etl.extractors.base import BaseSheetExtractor
from sheet_etl.extractors.generic_extractor import GenericSheetExtractor
from sheet_etl.extractors.matrix_extractor import MatrixSheetExtractor

__all__ = [
    "BaseSheetExtractor",
    "GenericSheetExtractor",
    "MatrixSheetExtractor",
]
