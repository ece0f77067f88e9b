"""Data structures describing an AIA payment application and its template."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .errors import TemplateFetchError
from .number_format import parse_number


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class LineItem:
    """One row of the G703 schedule of values."""

    item_number: str
    description: str
    scheduled_value: float = 0.0
    previous_applications: float = 0.0
    this_period: float = 0.0
    materials_stored: float = 0.0
    total_completed: float = 0.0
    percent_complete: float = 0.0
    balance_to_finish: float = 0.0
    retainage: float = 0.0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "LineItem":
        numeric = {
            f.name: parse_number(mapping.get(f.name))
            for f in fields(cls)
            if f.name not in ("item_number", "description")
        }
        return cls(
            item_number=_text(mapping.get("item_number")),
            description=_text(mapping.get("description")),
            **numeric,
        )


@dataclass(frozen=True)
class InvoiceApplicationData:
    """Values merged into a template for one G702/G703 application.

    Scalar fields are expected to be formatted by the caller already
    (amounts as ``$1,234.50``, dates as ``MM/DD/YYYY``).
    """

    # Company
    company_name: str = ""
    company_address: str = ""
    company_city: str = ""
    company_state: str = ""
    company_zip: str = ""
    company_phone: str = ""
    company_email: str = ""
    license_number: str = ""

    # Owner / customer
    owner_name: str = ""
    owner_address: str = ""
    owner_city: str = ""
    owner_state: str = ""
    owner_zip: str = ""
    owner_phone: str = ""
    owner_email: str = ""

    # Project / job
    project_name: str = ""
    project_number: str = ""
    project_address: str = ""
    project_city: str = ""
    project_state: str = ""
    project_zip: str = ""
    architect_name: str = ""
    architect_project_no: str = ""

    # Contract
    contract_date: str = ""
    contract_amount: str = ""
    change_orders_amount: str = ""
    current_contract_sum: str = ""
    retainage_percent: str = ""

    # Application
    application_number: str = ""
    application_date: str = ""
    period_from: str = ""
    period_to: str = ""
    total_completed: str = ""
    total_retainage: str = ""
    total_earned_less_retainage: str = ""
    less_previous_certificates: str = ""
    current_payment_due: str = ""
    balance_to_finish: str = ""

    line_items: Tuple[LineItem, ...] = field(default_factory=tuple)

    @classmethod
    def scalar_field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "line_items")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "InvoiceApplicationData":
        """Build the value object from a JSON-like dictionary.

        Missing or ``None`` scalars become empty strings. The schedule may be
        supplied as ``line_items`` or ``lineItems``.
        """

        scalars = {name: _text(mapping.get(name)) for name in cls.scalar_field_names()}
        raw_items: Iterable[Any] = mapping.get("line_items")
        if raw_items is None:
            raw_items = mapping.get("lineItems") or ()
        items = tuple(
            item if isinstance(item, LineItem) else LineItem.from_mapping(item)
            for item in raw_items
        )
        return cls(line_items=items, **scalars)

    def to_mapping(self) -> Dict[str, Any]:
        """Return a serialisable representation of the application data."""

        data = asdict(self)
        data["line_items"] = [asdict(item) for item in self.line_items]
        return data


@dataclass(frozen=True)
class TemplateDescriptor:
    """A company's uploaded AIA spreadsheet template."""

    company_id: str
    file_url: str
    template_name: str = ""
    file_name: str = ""
    id: Optional[str] = None
    file_size: int = 0
    is_default: bool = False

    @classmethod
    def from_record(cls, record: Any) -> "TemplateDescriptor":
        """Validate a storage record into a descriptor.

        Raises
        ------
        TemplateFetchError
            If the record is not a mapping or lacks ``company_id``/``file_url``.
        """

        if not isinstance(record, Mapping):
            raise TemplateFetchError(f"Unexpected template record: {record!r}")
        company_id = _text(record.get("company_id")).strip()
        file_url = _text(record.get("file_url")).strip()
        if not company_id or not file_url:
            raise TemplateFetchError(
                f"Template record {record.get('id')!r} is missing company_id or file_url"
            )
        try:
            file_size = int(record.get("file_size") or 0)
        except (TypeError, ValueError):
            file_size = 0
        record_id = record.get("id")
        return cls(
            company_id=company_id,
            file_url=file_url,
            template_name=_text(record.get("template_name")),
            file_name=_text(record.get("file_name")),
            id=_text(record_id) if record_id is not None else None,
            file_size=file_size,
            is_default=bool(record.get("is_default")),
        )

    @property
    def display_name(self) -> str:
        return self.template_name or self.file_name or self.file_url.rsplit("/", 1)[-1]


__all__ = ["InvoiceApplicationData", "LineItem", "TemplateDescriptor"]
