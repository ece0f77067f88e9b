from __future__ import annotations

import pytest
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from logic.aia_data import LineItem
from logic.diagnostics import GenerationReport
from logic.schedule_expander import (
    EmptySchedulePolicy,
    RowTemplate,
    expand_schedule,
    expand_sheet_schedule,
    locate_schedule_rows,
)

SCALARS = {"project_name": "Riverside Tower"}


def _items(count):
    return [
        LineItem(
            item_number=str(i),
            description=f"Line {i}",
            scheduled_value=1000 * i,
            this_period=100 * i,
            percent_complete=10 * i,
        )
        for i in range(1, count + 1)
    ]


def _template():
    wb = Workbook()
    ws = wb.active
    ws.title = "G703"
    ws["A1"] = "Continuation sheet for {project_name}"
    ws["A3"] = "Item"
    ws["B3"] = "Description"
    ws["A4"] = "{sov_item_no}"
    ws["A4"].font = Font(bold=True)
    ws["B4"] = "{sov_description}"
    ws["B4"].fill = PatternFill("solid", fgColor="FFFF00")
    ws["C4"] = "{sov_scheduled_value}"
    ws["C4"].number_format = "@"
    ws["D4"] = "=E4*2"
    ws["E4"] = 5
    ws["F4"] = "{sov_percent_complete}"
    ws.row_dimensions[4].height = 22
    ws["A5"] = "Grand total"
    ws["E5"] = "=SUM(E4:E4)"
    ws["G1"] = "=A5"
    return wb, ws


def _expand(wb, items, policy=EmptySchedulePolicy.CLEAR, report=None):
    anchors = locate_schedule_rows(wb, report)
    return expand_schedule(wb, anchors, items, SCALARS, policy, report)


def test_locate_schedule_rows():
    wb, _ = _template()

    anchors = locate_schedule_rows(wb)

    assert [(a.sheet_title, a.row) for a in anchors] == [("G703", 4)]


def test_locate_warns_about_extra_schedule_rows():
    wb, ws = _template()
    ws["A8"] = "{sov_item_no}"
    report = GenerationReport()

    anchors = locate_schedule_rows(wb, report)

    assert [a.row for a in anchors] == [4]
    assert len(report.warnings) == 1


@pytest.mark.parametrize("count", [1, 2, 5])
def test_one_row_per_line_item(count):
    wb, ws = _template()
    max_row = ws.max_row

    written = _expand(wb, _items(count))

    assert written == count
    assert ws.max_row == max_row + count - 1
    for offset in range(count):
        assert ws.cell(row=4 + offset, column=1).value == str(offset + 1)
        assert ws.cell(row=4 + offset, column=2).value == f"Line {offset + 1}"
    assert ws.cell(row=4 + count, column=1).value == "Grand total"


def test_cloned_rows_keep_styles_and_height():
    wb, ws = _template()

    _expand(wb, _items(3))

    for row in (4, 5, 6):
        assert ws.cell(row=row, column=1).font.bold is True
        assert ws.cell(row=row, column=2).fill.fgColor.rgb == "00FFFF00"
        assert ws.cell(row=row, column=3).number_format == "@"
        assert ws.row_dimensions[row].height == 22


def test_values_are_formatted_text():
    wb, ws = _template()

    _expand(wb, _items(2))

    assert ws["C4"].value == "$1,000.00"
    assert ws["C5"].value == "$2,000.00"
    assert ws["F5"].value == "20.0%"
    assert ws["C5"].data_type == "s"


def test_cloned_formulas_follow_their_row():
    wb, ws = _template()

    _expand(wb, _items(3))

    assert ws["D4"].value == "=E4*2"
    assert ws["D5"].value == "=E5*2"
    assert ws["D6"].value == "=E6*2"
    assert [ws.cell(row=r, column=5).value for r in (4, 5, 6)] == [5, 5, 5]


def test_references_below_the_schedule_are_shifted():
    wb, ws = _template()

    _expand(wb, _items(3))

    assert ws["A7"].value == "Grand total"
    assert ws["E7"].value == "=SUM(E4:E4)"
    assert ws["G1"].value == "=A7"


def test_single_row_merges_are_repeated():
    wb, ws = _template()
    ws["H4"] = "{sov_retainage}"
    ws.merge_cells("H4:I4")

    _expand(wb, _items(2))

    merged = {str(r) for r in ws.merged_cells.ranges}
    assert {"H4:I4", "H5:I5"} <= merged
    assert ws["H5"].value == "$0.00"


def test_mixed_scalar_and_schedule_tokens_in_one_cell():
    wb, ws = _template()
    ws["G4"] = "{sov_item_no} - {project_name}"

    _expand(wb, _items(2))

    assert ws["G4"].value == "1 - Riverside Tower"
    assert ws["G5"].value == "2 - Riverside Tower"


def test_braces_in_descriptions_are_kept():
    wb, ws = _template()
    item = LineItem(item_number="1", description="Install {project_name} per {note}")

    _expand(wb, [item])

    assert ws["B4"].value == "Install {project_name} per {note}"


def test_no_line_items_clears_row_by_default():
    wb, ws = _template()
    max_row = ws.max_row

    written = _expand(wb, [])

    assert written == 0
    assert ws.max_row == max_row
    assert ws["A4"].value == ""
    assert ws["B4"].value == ""
    assert ws["A4"].font.bold is True
    assert ws["D4"].value == "=E4*2"
    assert ws["A5"].value == "Grand total"


def test_no_line_items_can_keep_row():
    wb, ws = _template()

    _expand(wb, [], policy=EmptySchedulePolicy.KEEP)

    assert ws["A4"].value == "{sov_item_no}"
    assert ws["B4"].value == "{sov_description}"


def test_report_counts_rows():
    wb, _ = _template()
    report = GenerationReport()

    _expand(wb, _items(4), report=report)

    assert report.schedule_rows_written == 4


def test_each_sheet_expanded_independently():
    wb, ws = _template()
    other = wb.create_sheet("Copy")
    other["B2"] = "{sov_description}"
    other["B3"] = "after"

    _expand(wb, _items(3))

    assert [other.cell(row=r, column=2).value for r in (2, 3, 4)] == [
        "Line 1",
        "Line 2",
        "Line 3",
    ]
    assert other["B5"].value == "after"
    assert ws["A7"].value == "Grand total"


def test_row_template_capture_skips_empty_cells():
    wb, ws = _template()

    template = RowTemplate.capture(ws, 4)

    assert [c.column for c in template.cells] == [1, 2, 3, 4, 5, 6]
    assert [c.column for c in template.schedule_cells] == [1, 2, 3, 6]
    assert template.height == 22


def test_expand_sheet_schedule_single_item_inserts_nothing():
    wb, ws = _template()

    expand_sheet_schedule(ws, 4, _items(1), SCALARS)

    assert ws["A5"].value == "Grand total"
    assert ws["A4"].value == "1"


def test_policy_parse():
    assert EmptySchedulePolicy.parse("KEEP") is EmptySchedulePolicy.KEEP
    assert EmptySchedulePolicy.parse(EmptySchedulePolicy.CLEAR) is EmptySchedulePolicy.CLEAR
    with pytest.raises(ValueError):
        EmptySchedulePolicy.parse("drop")
