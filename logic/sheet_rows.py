"""Row insertion that keeps the rest of a worksheet consistent.

``Worksheet.insert_rows`` only moves cells. Merged ranges, row heights,
drawings, the print area, defined names, array formula ranges and formula
references stay where they were, which corrupts templates with a totals
block below the schedule. The helpers here apply the same shift to all of
them.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor, TwoCellAnchor
from openpyxl.formula.tokenizer import Token, Tokenizer
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

_CELL_RE = re.compile(r"^(\$?)([A-Za-z]{1,3})(\$?)(\d+)$")
_ROW_RE = re.compile(r"^(\$?)(\d+)$")
_COLUMN_RE = re.compile(r"^\$?[A-Za-z]{1,3}$")
_AREA_SPLIT_RE = re.compile(r",(?=(?:[^']*'[^']*')*[^']*$)")


def _split_sheet(ref: str) -> tuple[Optional[str], str]:
    """Split ``'Sheet 1'!A1:B2`` into ``("Sheet 1", "A1:B2")``."""
    if "!" not in ref:
        return None, ref
    sheet, _, body = ref.rpartition("!")
    if sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    return sheet, body


def _shift_part(part: str, idx: int, amount: int) -> str:
    match = _CELL_RE.match(part)
    if match:
        col_abs, col, row_abs, row = match.groups()
        row_num = int(row)
        if row_num >= idx:
            row_num += amount
        return f"{col_abs}{col}{row_abs}{row_num}"
    match = _ROW_RE.match(part)
    if match:
        row_abs, row = match.groups()
        row_num = int(row)
        if row_num >= idx:
            row_num += amount
        return f"{row_abs}{row_num}"
    return part


def shift_reference(ref: str, idx: int, amount: int) -> str:
    """Shift the row numbers in one A1-style reference.

    Rows at or below *idx* move down by *amount*. Column-only references
    (``A:A``) and defined names are returned unchanged.
    """

    sheet, body = _split_sheet(ref)
    parts = body.split(":")
    if all(_COLUMN_RE.match(p) for p in parts):
        return ref
    shifted = ":".join(_shift_part(p, idx, amount) for p in parts)
    if sheet is None:
        return shifted
    return ref[: len(ref) - len(body)] + shifted


def shift_formula_rows(
    formula: str,
    host_sheet: str,
    target_sheet: str,
    idx: int,
    amount: int,
) -> str:
    """Return *formula* with references into *target_sheet* shifted.

    Unqualified references belong to *host_sheet*, the sheet holding the
    formula.
    """

    tokenizer = Tokenizer(formula)
    changed = False
    for token in tokenizer.items:
        if token.type != Token.OPERAND or token.subtype != Token.RANGE:
            continue
        sheet, _ = _split_sheet(token.value)
        if (sheet or host_sheet) != target_sheet:
            continue
        new_value = shift_reference(token.value, idx, amount)
        if new_value != token.value:
            token.value = new_value
            changed = True
    if not changed:
        return formula
    return tokenizer.render()


def _shift_formulas(wb: Workbook, target: Worksheet, idx: int, amount: int) -> int:
    count = 0
    for ws in wb.worksheets:
        for row in ws.iter_rows():
            for cell in row:
                value = cell.value
                if isinstance(value, ArrayFormula):
                    new_text = shift_formula_rows(value.text, ws.title, target.title, idx, amount)
                    new_ref = value.ref
                    if ws is target:
                        new_ref = shift_reference(value.ref, idx, amount)
                    if new_text != value.text or new_ref != value.ref:
                        value.text = new_text
                        value.ref = new_ref
                        count += 1
                elif cell.data_type == "f" and isinstance(value, str):
                    new_value = shift_formula_rows(value, ws.title, target.title, idx, amount)
                    if new_value != value:
                        cell.value = new_value
                        count += 1
    return count


def _shift_defined_names(wb: Workbook, target: Worksheet, idx: int, amount: int) -> int:
    """Move named ranges that point into *target*."""
    scopes = [(wb.defined_names, "")]
    scopes.extend((ws.defined_names, ws.title) for ws in wb.worksheets)
    count = 0
    for names, host in scopes:
        for defn in names.values():
            text = defn.attr_text
            if not text:
                continue
            # names hold a formula body without the leading "="
            new_text = shift_formula_rows(f"={text}", host, target.title, idx, amount)[1:]
            if new_text != text:
                defn.attr_text = new_text
                count += 1
    return count


def _shift_merged_cells(ws: Worksheet, idx: int, amount: int) -> None:
    affected = [m for m in ws.merged_cells.ranges if m.max_row >= idx]
    for merged in affected:
        # re-add so the collection sees the new bounds
        ws.merged_cells.remove(merged)
        if merged.min_row >= idx:
            merged.shift(row_shift=amount)
        else:
            merged.expand(down=amount)
        ws.merged_cells.add(merged)


def _shift_row_dimensions(ws: Worksheet, idx: int, amount: int) -> None:
    dims = ws.row_dimensions
    for row_idx in sorted((i for i in list(dims) if i >= idx), reverse=True):
        dim = dims.pop(row_idx)
        dim.index = row_idx + amount
        dims[row_idx + amount] = dim


def _shift_drawings(ws: Worksheet, idx: int, amount: int) -> None:
    """Move images and charts anchored at or below *idx*."""
    drawings: Iterable = list(getattr(ws, "_images", [])) + list(getattr(ws, "_charts", []))
    for drawing in drawings:
        anchor = getattr(drawing, "anchor", None)
        if anchor is None:
            continue
        # anchor rows are zero based
        if isinstance(anchor, TwoCellAnchor):
            from_attr = "from_" if hasattr(anchor, "from_") else "_from"
            if getattr(anchor, from_attr).row >= idx - 1:
                getattr(anchor, from_attr).row += amount
                anchor.to.row += amount
        elif isinstance(anchor, OneCellAnchor):
            if anchor._from.row >= idx - 1:
                anchor._from.row += amount


def _shift_print_area(ws: Worksheet, idx: int, amount: int) -> None:
    area = ws.print_area
    if not area:
        return
    refs: List[str] = []
    for ref in _AREA_SPLIT_RE.split(str(area)):
        _, body = _split_sheet(ref.strip())
        refs.append(shift_reference(body, idx, amount))
    ws.print_area = refs


def insert_rows(ws: Worksheet, idx: int, amount: int) -> None:
    """Insert *amount* empty rows before row *idx* of *ws*."""

    if amount <= 0:
        return
    ws.insert_rows(idx, amount)
    _shift_merged_cells(ws, idx, amount)
    _shift_row_dimensions(ws, idx, amount)
    _shift_drawings(ws, idx, amount)
    _shift_print_area(ws, idx, amount)
    shifted = _shift_formulas(ws.parent, ws, idx, amount)
    renamed = _shift_defined_names(ws.parent, ws, idx, amount)
    logger.debug(
        "Inserted %d row(s) at %d on '%s', %d formula(s) and %d name(s) adjusted",
        amount,
        idx,
        ws.title,
        shifted,
        renamed,
    )


__all__ = ["insert_rows", "shift_formula_rows", "shift_reference"]
