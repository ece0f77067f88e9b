"""Placeholder vocabulary and the token maps built from application data."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .aia_data import InvoiceApplicationData, LineItem
from .number_format import format_currency, format_percent

PLACEHOLDER_CATEGORIES: List[Tuple[str, List[Tuple[str, str]]]] = [
    (
        "Company Information",
        [
            ("company_name", "Your company legal name"),
            ("company_address", "Full company address"),
            ("company_city", "Company city"),
            ("company_state", "Company state abbreviation"),
            ("company_zip", "Company ZIP code"),
            ("company_phone", "Company phone number"),
            ("company_email", "Company email address"),
            ("license_number", "Contractor license number"),
        ],
    ),
    (
        "Customer/Owner Information",
        [
            ("owner_name", "Owner/Customer name"),
            ("owner_address", "Owner full address"),
            ("owner_city", "Owner city"),
            ("owner_state", "Owner state"),
            ("owner_zip", "Owner ZIP code"),
            ("owner_phone", "Owner phone number"),
            ("owner_email", "Owner email address"),
        ],
    ),
    (
        "Project/Job Information",
        [
            ("project_name", "Project/Job name"),
            ("project_number", "Project/Job number"),
            ("project_address", "Project site address"),
            ("project_city", "Project city"),
            ("project_state", "Project state"),
            ("project_zip", "Project ZIP code"),
            ("architect_name", "Architect name"),
            ("architect_project_no", "Architect project number"),
        ],
    ),
    (
        "Contract Information",
        [
            ("contract_date", "Original contract date"),
            ("contract_amount", "Original contract sum"),
            ("change_orders_amount", "Net change by change orders"),
            ("current_contract_sum", "Contract sum to date (line 3)"),
            ("retainage_percent", "Retainage percentage"),
        ],
    ),
    (
        "Application/Invoice Details",
        [
            ("application_number", "Application/Invoice number"),
            ("application_date", "Application date"),
            ("period_from", "Period covered start date"),
            ("period_to", "Period covered end date"),
            ("total_completed", "Total completed and stored to date"),
            ("total_retainage", "Total retainage amount"),
            ("total_earned_less_retainage", "Total earned less retainage (line 5a)"),
            ("less_previous_certificates", "Less previous certificates for payment"),
            ("current_payment_due", "Current payment due"),
            ("balance_to_finish", "Balance to finish including retainage"),
        ],
    ),
    (
        "G703 Schedule of Values",
        [
            ("sov_item_no", "Line item number"),
            ("sov_description", "Description of work"),
            ("sov_scheduled_value", "Scheduled value"),
            ("sov_previous_applications", "Work completed from previous applications"),
            ("sov_this_period", "Work completed this period"),
            ("sov_materials_stored", "Materials presently stored"),
            ("sov_total_completed", "Total completed and stored"),
            ("sov_percent_complete", "Percentage complete (G/C)"),
            ("sov_balance_to_finish", "Balance to finish (C-G)"),
            ("sov_retainage", "Retainage amount for line item"),
        ],
    ),
]

SOV_PREFIX = "sov_"

SCALAR_TOKENS: Tuple[str, ...] = tuple(
    name
    for _, entries in PLACEHOLDER_CATEGORIES
    for name, _ in entries
    if not name.startswith(SOV_PREFIX)
)
SOV_TOKENS: Tuple[str, ...] = tuple(
    name
    for _, entries in PLACEHOLDER_CATEGORIES
    for name, _ in entries
    if name.startswith(SOV_PREFIX)
)

# sov token -> LineItem attribute, for the amounts rendered as currency
_SOV_CURRENCY_FIELDS = {
    "sov_scheduled_value": "scheduled_value",
    "sov_previous_applications": "previous_applications",
    "sov_this_period": "this_period",
    "sov_materials_stored": "materials_stored",
    "sov_total_completed": "total_completed",
    "sov_balance_to_finish": "balance_to_finish",
    "sov_retainage": "retainage",
}


def placeholder_catalog() -> List[Tuple[str, List[Tuple[str, str]]]]:
    """Return ``(category, [(placeholder, description), ...])`` pairs.

    Placeholders are returned in their template form, e.g. ``{company_name}``.
    """

    return [
        (category, [(f"{{{name}}}", description) for name, description in entries])
        for category, entries in PLACEHOLDER_CATEGORIES
    ]


def build_token_map(data: InvoiceApplicationData) -> Dict[str, str]:
    """Return the scalar token map for *data*.

    Every token of :data:`SCALAR_TOKENS` is present; absent values map to
    an empty string.
    """

    return {name: getattr(data, name, "") or "" for name in SCALAR_TOKENS}


def build_line_item_tokens(item: LineItem) -> Dict[str, str]:
    """Return the per-row SOV token map for one schedule line."""

    tokens = {
        "sov_item_no": item.item_number or "",
        "sov_description": item.description or "",
        "sov_percent_complete": format_percent(item.percent_complete),
    }
    for token, attr in _SOV_CURRENCY_FIELDS.items():
        tokens[token] = format_currency(getattr(item, attr))
    return tokens


def empty_line_item_tokens() -> Dict[str, str]:
    """Return an SOV token map resolving every SOV token to ``""``."""

    return {name: "" for name in SOV_TOKENS}


__all__ = [
    "PLACEHOLDER_CATEGORIES",
    "SCALAR_TOKENS",
    "SOV_PREFIX",
    "SOV_TOKENS",
    "build_line_item_tokens",
    "build_token_map",
    "empty_line_item_tokens",
    "placeholder_catalog",
]
