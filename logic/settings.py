"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .env_loader import load_application_env
from .schedule_expander import EmptySchedulePolicy

DEFAULT_TEMPLATE_TABLE = "aia_invoice_templates"
DEFAULT_STORAGE_BUCKET = "company-files"


def _optional_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from exc
    return value if value > 0 else None


@dataclass(frozen=True)
class StorageSettings:
    """Where AIA template records and files live."""

    base_url: str
    api_key: str
    table: str = DEFAULT_TEMPLATE_TABLE
    bucket: str = DEFAULT_STORAGE_BUCKET
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "StorageSettings":
        load_application_env()
        base_url = (os.getenv("SUPABASE_URL") or "").strip().rstrip("/")
        api_key = (os.getenv("SUPABASE_KEY") or "").strip()
        if not base_url or not api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be configured")
        return cls(
            base_url=base_url,
            api_key=api_key,
            table=(os.getenv("AIA_TEMPLATE_TABLE") or DEFAULT_TEMPLATE_TABLE).strip(),
            bucket=(os.getenv("AIA_STORAGE_BUCKET") or DEFAULT_STORAGE_BUCKET).strip(),
            timeout=_optional_float("AIA_REQUEST_TIMEOUT"),
        )

    @property
    def rest_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def public_object_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path.lstrip('/')}"


def empty_schedule_policy_from_env() -> EmptySchedulePolicy:
    """Return the policy named by ``AIA_EMPTY_SCHEDULE`` (default ``clear``)."""

    load_application_env()
    return EmptySchedulePolicy.parse(os.getenv("AIA_EMPTY_SCHEDULE") or "clear")


__all__ = [
    "DEFAULT_STORAGE_BUCKET",
    "DEFAULT_TEMPLATE_TABLE",
    "StorageSettings",
    "empty_schedule_policy_from_env",
]
