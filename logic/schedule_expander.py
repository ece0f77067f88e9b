"""G703 schedule-of-values expansion.

A template carries one row with ``{sov_*}`` placeholders. That row is
snapshotted into an immutable :class:`RowTemplate` and every schedule line
is written from the snapshot, so inserting rows never changes what later
rows are copied from.
"""

from __future__ import annotations

import logging
from copy import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.formula.translate import Translator
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .aia_data import LineItem
from .diagnostics import GenerationReport
from .placeholders import has_schedule_token, is_text_cell, substitute_text, write_text
from .sheet_rows import insert_rows
from .token_mapper import build_line_item_tokens, empty_line_item_tokens

logger = logging.getLogger(__name__)


class EmptySchedulePolicy(str, Enum):
    """What happens to the template row when there are no line items."""

    CLEAR = "clear"
    KEEP = "keep"

    @classmethod
    def parse(cls, value: Any) -> "EmptySchedulePolicy":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown empty schedule policy: {value!r}")


@dataclass(frozen=True)
class ScheduleAnchor:
    """Location of a sheet's schedule template row."""

    sheet_title: str
    row: int


@dataclass(frozen=True)
class CellTemplate:
    column: int
    value: Any
    style: Any
    has_style: bool
    is_formula: bool
    is_schedule: bool


@dataclass(frozen=True)
class RowTemplate:
    """Snapshot of a template row: values, styles, height and merges."""

    row: int
    cells: Tuple[CellTemplate, ...]
    height: Optional[float]
    merged_spans: Tuple[Tuple[int, int], ...]

    @classmethod
    def capture(cls, ws: Worksheet, row: int) -> "RowTemplate":
        cells: List[CellTemplate] = []
        for cell in ws[row]:
            if isinstance(cell, MergedCell) or (cell.value is None and not cell.has_style):
                continue
            cells.append(
                CellTemplate(
                    column=cell.column,
                    value=cell.value,
                    style=copy(cell._style),
                    has_style=cell.has_style,
                    is_formula=cell.data_type == "f",
                    is_schedule=is_text_cell(cell) and has_schedule_token(cell.value),
                )
            )
        spans = tuple(
            (m.min_col, m.max_col)
            for m in ws.merged_cells.ranges
            if m.min_row == m.max_row == row
        )
        height = ws.row_dimensions[row].height if row in ws.row_dimensions else None
        return cls(row=row, cells=tuple(cells), height=height, merged_spans=spans)

    @property
    def schedule_cells(self) -> Tuple[CellTemplate, ...]:
        return tuple(c for c in self.cells if c.is_schedule)

    def clone_to(self, ws: Worksheet, row: int, overrides: Mapping[int, str]) -> None:
        """Write the snapshot into *row*, replacing values from *overrides*.

        *overrides* maps a column index to literal text. Formulas are
        translated to the target row the way a spreadsheet copy would.
        """

        for template in self.cells:
            target = ws.cell(row=row, column=template.column)
            if template.has_style:
                target._style = copy(template.style)
            if template.column in overrides:
                write_text(target, overrides[template.column])
            elif template.is_formula and isinstance(template.value, str) and row != self.row:
                origin = f"{get_column_letter(template.column)}{self.row}"
                destination = f"{get_column_letter(template.column)}{row}"
                target.value = Translator(template.value, origin=origin).translate_formula(destination)
            else:
                target.value = copy(template.value)
        if self.height is not None:
            ws.row_dimensions[row].height = self.height
        if row != self.row:
            for min_col, max_col in self.merged_spans:
                ws.merge_cells(
                    start_row=row, start_column=min_col, end_row=row, end_column=max_col
                )


def locate_schedule_rows(
    wb: Workbook, report: Optional[GenerationReport] = None
) -> List[ScheduleAnchor]:
    """Return the first ``{sov_*}`` row of each sheet, scanning top to bottom."""

    anchors: List[ScheduleAnchor] = []
    for ws in wb.worksheets:
        found: List[int] = []
        for row in ws.iter_rows():
            if any(is_text_cell(c) and has_schedule_token(c.value) for c in row):
                found.append(row[0].row)
        if not found:
            continue
        anchors.append(ScheduleAnchor(ws.title, found[0]))
        logger.debug("Schedule template row on '%s': %d", ws.title, found[0])
        if len(found) > 1:
            message = (
                f"Sheet '{ws.title}' has {len(found)} schedule rows; "
                f"only row {found[0]} is expanded"
            )
            logger.warning(message)
            if report is not None:
                report.warn(message)
    return anchors


def _row_overrides(
    template: RowTemplate, tokens: Mapping[str, str], report: Optional[GenerationReport]
) -> Dict[int, str]:
    return {
        cell.column: substitute_text(cell.value, tokens, report)
        for cell in template.schedule_cells
    }


def expand_sheet_schedule(
    ws: Worksheet,
    row: int,
    line_items: Sequence[LineItem],
    scalar_tokens: Mapping[str, str],
    policy: EmptySchedulePolicy = EmptySchedulePolicy.CLEAR,
    report: Optional[GenerationReport] = None,
) -> int:
    """Expand the template row *row* of *ws* into one row per line item.

    Returns the number of schedule rows written.
    """

    base_tokens = {key.lower(): value for key, value in scalar_tokens.items()}

    if not line_items:
        if policy is EmptySchedulePolicy.KEEP:
            logger.debug("No line items, template row %d on '%s' kept", row, ws.title)
            return 0
        template = RowTemplate.capture(ws, row)
        tokens = dict(base_tokens)
        tokens.update(empty_line_item_tokens())
        template.clone_to(ws, row, _row_overrides(template, tokens, report))
        logger.debug("No line items, template row %d on '%s' cleared", row, ws.title)
        return 0

    # the template row sits above the insertion point, so references it holds
    # into the rows below are already shifted when it is captured
    insert_rows(ws, row + 1, len(line_items) - 1)
    template = RowTemplate.capture(ws, row)

    for offset, item in enumerate(line_items):
        tokens = dict(base_tokens)
        tokens.update(build_line_item_tokens(item))
        template.clone_to(ws, row + offset, _row_overrides(template, tokens, report))

    logger.debug(
        "Sheet '%s': %d schedule row(s) written from row %d",
        ws.title,
        len(line_items),
        row,
    )
    return len(line_items)


def expand_schedule(
    wb: Workbook,
    anchors: Sequence[ScheduleAnchor],
    line_items: Sequence[LineItem],
    scalar_tokens: Mapping[str, str],
    policy: EmptySchedulePolicy = EmptySchedulePolicy.CLEAR,
    report: Optional[GenerationReport] = None,
) -> int:
    """Expand every located schedule row of *wb*."""

    written = 0
    for anchor in anchors:
        written += expand_sheet_schedule(
            wb[anchor.sheet_title],
            anchor.row,
            line_items,
            scalar_tokens,
            policy,
            report,
        )
    if report is not None:
        report.schedule_rows_written += written
    return written


__all__ = [
    "CellTemplate",
    "EmptySchedulePolicy",
    "RowTemplate",
    "ScheduleAnchor",
    "expand_schedule",
    "expand_sheet_schedule",
    "locate_schedule_rows",
]
