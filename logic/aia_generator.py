"""AIA G702/G703 documents rendered from company Excel templates.

The pipeline is::

    repository -> load -> locate schedule rows -> scalar placeholders
               -> schedule expansion -> serialize -> package

Each call loads its own workbook and shares no state with other calls,
so callers may run several generations on separate threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from services.template_repository import TemplateRepository

from .aia_data import InvoiceApplicationData
from .diagnostics import GenerationReport
from .output_packager import GeneratedDocument, package_document
from .placeholders import fill_scalar_placeholders
from .schedule_expander import EmptySchedulePolicy, expand_schedule, locate_schedule_rows
from .settings import empty_schedule_policy_from_env
from .token_mapper import build_token_map
from .workbook_codec import load_workbook_bytes, serialize_workbook

OUTPUT_FORMATS = ("excel", "pdf")

_module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    blob: bytes
    report: GenerationReport = field(compare=False)


def render_template(
    template_bytes: bytes,
    data: InvoiceApplicationData,
    *,
    policy: Union[EmptySchedulePolicy, str] = EmptySchedulePolicy.CLEAR,
    logger: Optional[logging.Logger] = None,
) -> RenderResult:
    """Merge *data* into the template and return the new workbook bytes.

    Raises
    ------
    TemplateParseError
        If *template_bytes* is not a readable ``.xlsx``.
    TemplateWriteError
        If the merged workbook cannot be written.
    """

    log = logger or _module_logger
    policy = EmptySchedulePolicy.parse(policy)
    report = GenerationReport()

    wb = load_workbook_bytes(template_bytes)
    anchors = locate_schedule_rows(wb, report)
    tokens = build_token_map(data)
    fill_scalar_placeholders(wb, tokens, report)
    expand_schedule(wb, anchors, data.line_items, tokens, policy, report)
    blob = serialize_workbook(wb)

    if report.unknown_tokens:
        log.warning(
            "Unknown placeholders replaced with empty text: %s",
            ", ".join(sorted(report.unknown_tokens)),
        )
    log.info(
        "Template rendered: %d sheet(s), %d scalar cell(s), %d schedule row(s)",
        report.sheets_scanned,
        report.scalar_cells_replaced,
        report.schedule_rows_written,
    )
    return RenderResult(blob=blob, report=report)


def generate(
    company_id: str,
    data: InvoiceApplicationData,
    *,
    for_review: bool = False,
    output_format: str = "excel",
    repository: Any = None,
    policy: Union[EmptySchedulePolicy, str, None] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[GeneratedDocument]:
    """Generate the AIA document for *company_id* from its default template.

    Parameters
    ----------
    company_id: str
        Company whose default template is used.
    data: InvoiceApplicationData
        Values merged into the template.
    for_review: bool, optional
        Adds the ``_REVIEW`` suffix to the file name.
    output_format: str, optional
        ``"excel"`` or ``"pdf"``. Templates only produce spreadsheets, so
        ``"pdf"`` returns ``None`` and the caller renders its own PDF.
    repository: optional
        Object with ``resolve_default_template`` and ``fetch_template_bytes``;
        defaults to :class:`services.template_repository.TemplateRepository`
        configured from the environment.
    policy: optional
        Handling of a schedule row when there are no line items; read from
        ``AIA_EMPTY_SCHEDULE`` when omitted.
    logger: logging.Logger, optional
        Logger receiving progress messages.

    Returns
    -------
    GeneratedDocument or None
        ``None`` when the company has no default template.
    """

    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format!r}")

    log = logger or _module_logger
    if output_format == "pdf":
        log.info("PDF requested for company %s, leaving it to the fallback renderer", company_id)
        return None

    if repository is None:
        repository = TemplateRepository.from_env()
    if policy is None:
        policy = empty_schedule_policy_from_env()

    log.info("Generating AIA document for company %s", company_id)
    descriptor = repository.resolve_default_template(company_id)
    if descriptor is None:
        log.info("No default template for company %s", company_id)
        return None

    template_bytes = repository.fetch_template_bytes(descriptor)
    log.debug("Using template %s (%d bytes)", descriptor.display_name, len(template_bytes))

    result = render_template(template_bytes, data, policy=policy, logger=log)
    document = package_document(
        result.blob, data.application_number, for_review, report=result.report
    )
    log.info("AIA document ready: %s", document.file_name)
    return document


__all__ = ["OUTPUT_FORMATS", "RenderResult", "generate", "render_template"]
