# src/core/address/postal_code.py
"""
CEP lookup against BrasilAPI (`GET /api/cep/v2/{code}`).
"""

from __future__ import annotations

from urllib.parse import quote

import requests

from src.core.api.errors import HttpStatusError, PostalCodeLookupError, api_error_guard
from src.core.api.http import HttpClient
from src.schemas.models import AddressLookupResult, ApiSettings


class PostalCodeClient(HttpClient):
    """Public CEP service; never sends the back-office bearer token."""

    def __init__(self, settings: ApiSettings, session: requests.Session | None = None) -> None:
        super().__init__(settings.postal_code_base_url, settings=settings, session=session, auth=False)

    def lookup(self, cep: str) -> AddressLookupResult:
        try:
            data = self.get_json(f"/api/cep/v2/{quote(cep, safe='')}")
        except HttpStatusError as e:
            if e.status_code in (400, 404):
                raise PostalCodeLookupError(f"CEP {cep!r} not found") from e
            raise
        with api_error_guard():
            return AddressLookupResult.from_payload(data)
