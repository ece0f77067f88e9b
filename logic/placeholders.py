"""Replacement of ``{token}`` placeholders in workbook cells."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from openpyxl import Workbook
from openpyxl.cell import Cell
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .diagnostics import GenerationReport
from .token_mapper import SOV_PREFIX

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")
_SOV_MARKER = "{" + SOV_PREFIX


def is_text_cell(cell: Cell) -> bool:
    """Return ``True`` for cells holding literal text (formulas excluded)."""
    return isinstance(cell.value, str) and cell.data_type != "f"


def has_schedule_token(value: Any) -> bool:
    """Return ``True`` if *value* carries a ``{sov_...}`` placeholder."""
    return isinstance(value, str) and _SOV_MARKER in value.lower()


def write_text(cell: Cell, text: str) -> None:
    """Store *text* as a literal string, even if it looks like a formula."""
    cell.value = ILLEGAL_CHARACTERS_RE.sub("", text)
    cell.data_type = "s"


def substitute_text(
    text: str,
    tokens: Mapping[str, str],
    report: Optional[GenerationReport] = None,
) -> str:
    """Replace every ``{name}`` in *text* in a single pass.

    Names are matched case-insensitively against *tokens* (whose keys are
    expected in lower case). Unknown names resolve to an empty string.
    Replacement values are never scanned again.
    """

    if "{" not in text:
        return text

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1).lower()
        if name in tokens:
            return tokens[name]
        if report is not None:
            report.note_unknown(name)
        logger.debug("Unknown placeholder {%s} replaced with empty text", name)
        return ""

    return TOKEN_RE.sub(_replace, text)


def fill_scalar_placeholders(
    wb: Workbook,
    tokens: Mapping[str, str],
    report: Optional[GenerationReport] = None,
) -> int:
    """Substitute scalar placeholders in every sheet of *wb*.

    Cells carrying a schedule-of-values token are left for the row expander.
    Only the cell value is rewritten; style and number format stay as the
    template author set them. Returns the number of changed cells.
    """

    lowered = {key.lower(): value for key, value in tokens.items()}
    changed = 0
    for ws in wb.worksheets:
        if report is not None:
            report.sheets_scanned += 1
        for row in ws.iter_rows():
            for cell in row:
                if not is_text_cell(cell) or "{" not in cell.value:
                    continue
                if has_schedule_token(cell.value):
                    continue
                new_value = substitute_text(cell.value, lowered, report)
                if new_value != cell.value:
                    write_text(cell, new_value)
                    changed += 1
        logger.debug("Sheet '%s': scalar placeholders processed", ws.title)

    if report is not None:
        report.scalar_cells_replaced += changed
    logger.debug("Scalar placeholders replaced in %d cell(s)", changed)
    return changed


__all__ = [
    "TOKEN_RE",
    "fill_scalar_placeholders",
    "has_schedule_token",
    "is_text_cell",
    "substitute_text",
    "write_text",
]
