"""Naming and saving of generated AIA documents."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .diagnostics import GenerationReport
from .workbook_codec import XLSX_MIME_TYPE

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\s]+')


@dataclass(frozen=True)
class GeneratedDocument:
    """A finished document ready to be handed to the user."""

    blob: bytes
    file_name: str
    format: str = "excel"
    mime_type: str = XLSX_MIME_TYPE
    report: GenerationReport = field(default_factory=GenerationReport, compare=False)


def document_file_name(application_number: str, for_review: bool = False) -> str:
    """Return ``AIA_Invoice_<number>[_REVIEW].xlsx``."""

    number = _UNSAFE_FILENAME_RE.sub("_", str(application_number or "").strip())
    suffix = "_REVIEW" if for_review else ""
    return f"AIA_Invoice_{number}{suffix}.xlsx"


def package_document(
    blob: bytes,
    application_number: str,
    for_review: bool = False,
    report: GenerationReport | None = None,
) -> GeneratedDocument:
    """Wrap serialized workbook bytes with their file name and MIME type."""

    return GeneratedDocument(
        blob=blob,
        file_name=document_file_name(application_number, for_review),
        report=report or GenerationReport(),
    )


def save_document(document: GeneratedDocument, directory: Union[str, Path]) -> Path:
    """Write *document* into *directory* and return the file path."""

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / document.file_name
    path.write_bytes(document.blob)
    logger.info("Saved %s (%d bytes)", path, len(document.blob))
    return path


__all__ = [
    "GeneratedDocument",
    "document_file_name",
    "package_document",
    "save_document",
]
