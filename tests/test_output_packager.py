from __future__ import annotations

from logic.diagnostics import GenerationReport
from logic.output_packager import (
    document_file_name,
    package_document,
    save_document,
)
from logic.workbook_codec import XLSX_MIME_TYPE


def test_document_file_name():
    assert document_file_name("12") == "AIA_Invoice_12.xlsx"
    assert document_file_name("12", for_review=True) == "AIA_Invoice_12_REVIEW.xlsx"


def test_document_file_name_replaces_unsafe_characters():
    assert document_file_name("2024/03 #7") == "AIA_Invoice_2024_03_#7.xlsx"
    assert document_file_name("") == "AIA_Invoice_.xlsx"


def test_package_document():
    report = GenerationReport(schedule_rows_written=3)

    document = package_document(b"PK-data", "5", for_review=True, report=report)

    assert document.blob == b"PK-data"
    assert document.file_name == "AIA_Invoice_5_REVIEW.xlsx"
    assert document.format == "excel"
    assert document.mime_type == XLSX_MIME_TYPE
    assert document.report.schedule_rows_written == 3


def test_save_document_writes_file(tmp_path):
    document = package_document(b"payload", "9")

    path = save_document(document, tmp_path / "out")

    assert path == tmp_path / "out" / "AIA_Invoice_9.xlsx"
    assert path.read_bytes() == b"payload"
