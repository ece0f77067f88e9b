"""Access to company AIA templates stored in Supabase."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from logic.aia_data import TemplateDescriptor
from logic.errors import TemplateFetchError
from logic.settings import StorageSettings

logger = logging.getLogger(__name__)


class TemplateRepository:
    """Reads template records through the PostgREST API and downloads files."""

    def __init__(
        self,
        settings: StorageSettings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> "TemplateRepository":
        return cls(StorageSettings.from_env(), session=session)

    def _headers(self) -> dict:
        key = self.settings.api_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        }

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.settings.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TemplateFetchError(f"Request to {url} failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise TemplateFetchError(
                f"Template storage returned HTTP {response.status_code} for {url}"
            )
        return response

    def _query(self, params: dict) -> List[Any]:
        response = self._get(self.settings.rest_url, headers=self._headers(), params=params)
        try:
            rows = response.json()
        except ValueError as exc:
            raise TemplateFetchError("Template storage returned invalid JSON") from exc
        if not isinstance(rows, list):
            raise TemplateFetchError(f"Unexpected template query result: {rows!r}")
        return rows

    def resolve_default_template(self, company_id: str) -> Optional[TemplateDescriptor]:
        """Return the company's default template or ``None`` if there is none."""

        rows = self._query(
            {
                "select": "*",
                "company_id": f"eq.{company_id}",
                "is_default": "eq.true",
            }
        )
        if not rows:
            logger.info("No default AIA template for company %s", company_id)
            return None
        if len(rows) > 1:
            logger.warning(
                "Company %s has %d default AIA templates, using the first",
                company_id,
                len(rows),
            )
        descriptor = TemplateDescriptor.from_record(rows[0])
        logger.info(
            "Default AIA template for company %s: %s", company_id, descriptor.display_name
        )
        return descriptor

    def list_templates(self, company_id: str) -> List[TemplateDescriptor]:
        """Return all templates of the company, newest first."""

        rows = self._query(
            {
                "select": "*",
                "company_id": f"eq.{company_id}",
                "order": "created_at.desc",
            }
        )
        return [TemplateDescriptor.from_record(row) for row in rows]

    def template_url(self, descriptor: TemplateDescriptor) -> str:
        url = descriptor.file_url
        if url.startswith(("http://", "https://")):
            return url
        return self.settings.public_object_url(url)

    def fetch_template_bytes(self, descriptor: TemplateDescriptor) -> bytes:
        """Download the binary content of *descriptor*.

        Raises
        ------
        TemplateFetchError
            On transport errors or any non-2xx response.
        """

        url = self.template_url(descriptor)
        response = self._get(url)
        payload = response.content
        logger.debug("Template %s downloaded (%d bytes)", descriptor.display_name, len(payload))
        return payload


__all__ = ["TemplateRepository"]
