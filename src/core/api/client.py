"""
Listings / storage API client.

Endpoints
---------
  GET  /imovel/{id}              property record for editing
  GET  /tipo-imovel              property types
  GET  {imagePath}               stored image bytes
  POST /files/delete-images      {files: [filename, ...]}
  POST /files/upload             multipart, one `files` part per image → {paths: [...]}
  PUT  /imovel/{id}              validated fields + files: [path, ...]

Public-site reads:
  GET  /imovel/cidades           cities with listings
  GET  /imovel/bairro/{city}     neighborhoods of a city
  GET  /imovel?limit=N&visible=true  most recent visible listings
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import requests
from pydantic import TypeAdapter

from src.schemas.models import (
    ApiSettings,
    CityOption,
    ListingSummary,
    NeighborhoodOption,
    PropertyRecord,
    PropertyType,
    UploadResult,
)

from .errors import InvalidResponseError, api_error_guard
from .http import HttpClient

# (field name, (filename, bytes, content type)) as accepted by requests' `files=`
UploadPart = tuple[str, tuple[str, bytes, str]]

_TYPES = TypeAdapter(list[PropertyType])
_CITIES = TypeAdapter(list[CityOption])
_NEIGHBORHOODS = TypeAdapter(list[NeighborhoodOption])
_SUMMARIES = TypeAdapter(list[ListingSummary])


class ListingsApi(HttpClient):
    """Synchronous client for the brokerage backend."""

    def __init__(self, settings: ApiSettings, session: requests.Session | None = None) -> None:
        super().__init__(settings.api_base_url, settings=settings, session=session)

    # ---------- Back office ----------

    def get_property(self, property_id: str) -> PropertyRecord:
        data = self.get_json(f"/imovel/{quote(str(property_id), safe='')}")
        with api_error_guard():
            return PropertyRecord.model_validate(data)

    def list_property_types(self) -> list[PropertyType]:
        data = self.get_json("/tipo-imovel")
        with api_error_guard():
            return _TYPES.validate_python(data)

    def fetch_image(self, path: str) -> bytes:
        """Binary GET of a stored image (path may be absolute or API-relative)."""
        resp = self.request("GET", path, headers={"Accept": "*/*"})
        return resp.content

    def delete_images(self, filenames: Sequence[str]) -> None:
        self.request("POST", "/files/delete-images", json={"files": list(filenames)})

    def upload_images(self, parts: Sequence[UploadPart]) -> UploadResult:
        if not parts:
            raise ValueError("upload_images requires at least one file part")
        resp = self.request("POST", "/files/upload", files=list(parts))
        with api_error_guard():
            result = UploadResult.model_validate(resp.json())
        if not result.paths:
            raise InvalidResponseError("Upload response did not include any storage paths.")
        return result

    def update_property(self, property_id: str, payload: dict[str, Any]) -> Any:
        resp = self.request("PUT", f"/imovel/{quote(str(property_id), safe='')}", json=payload)
        if not resp.content:
            return None
        with api_error_guard():
            return resp.json()

    # ---------- Public site ----------

    def list_cities(self) -> list[CityOption]:
        data = self.get_json("/imovel/cidades")
        with api_error_guard():
            return _CITIES.validate_python(data)

    def list_neighborhoods(self, city: str) -> list[NeighborhoodOption]:
        data = self.get_json(f"/imovel/bairro/{quote(city, safe='')}")
        with api_error_guard():
            return _NEIGHBORHOODS.validate_python(data)

    def list_recent(self, limit: int = 6) -> list[ListingSummary]:
        data = self.get_json("/imovel", params={"limit": limit, "visible": "true"})
        with api_error_guard():
            return _SUMMARIES.validate_python(data["properties"])
