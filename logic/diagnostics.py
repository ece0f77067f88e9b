"""Diagnostics collected while a template is rendered."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set


@dataclass
class GenerationReport:
    """What one render did to the workbook.

    Returned to the caller together with the document so nothing has to be
    inspected through log output.
    """

    sheets_scanned: int = 0
    scalar_cells_replaced: int = 0
    schedule_rows_written: int = 0
    unknown_tokens: Set[str] = field(default_factory=set)
    warnings: List[str] = field(default_factory=list)

    def note_unknown(self, name: str) -> None:
        self.unknown_tokens.add(name.lower())

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "sheets_scanned": self.sheets_scanned,
            "scalar_cells_replaced": self.scalar_cells_replaced,
            "schedule_rows_written": self.schedule_rows_written,
            "unknown_tokens": sorted(self.unknown_tokens),
            "warnings": list(self.warnings),
        }
