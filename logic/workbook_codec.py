"""Conversion between template bytes and the in-memory openpyxl workbook."""

from __future__ import annotations

import logging
from io import BytesIO

from openpyxl import Workbook, load_workbook

from .errors import TemplateParseError, TemplateWriteError

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def load_workbook_bytes(data: bytes) -> Workbook:
    """Load an ``.xlsx`` document from *data*.

    Formulas are kept as formulas (``data_only`` is off) so the generated
    document still calculates in Excel.

    Raises
    ------
    TemplateParseError
        If *data* is empty or is not a readable Open XML spreadsheet,
        including archives with malformed XML parts.
    """

    if not data:
        raise TemplateParseError("Template file is empty")
    try:
        wb = load_workbook(BytesIO(data), data_only=False)
    except Exception as exc:
        raise TemplateParseError(f"Template is not a valid .xlsx workbook: {exc}") from exc
    # output is always a plain workbook, even for .xltx templates
    wb.template = False
    logger.debug("Template loaded (%d bytes), sheets: %s", len(data), wb.sheetnames)
    return wb


def serialize_workbook(wb: Workbook) -> bytes:
    """Return *wb* as ``.xlsx`` bytes.

    Raises
    ------
    TemplateWriteError
        If openpyxl fails to write the workbook. Nothing partial is returned.
    """

    buffer = BytesIO()
    try:
        wb.save(buffer)
    except Exception as exc:
        raise TemplateWriteError(f"Failed to write the generated workbook: {exc}") from exc
    payload = buffer.getvalue()
    logger.debug("Workbook serialized (%d bytes)", len(payload))
    return payload


__all__ = ["XLSX_MIME_TYPE", "load_workbook_bytes", "serialize_workbook"]
