# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import io
import json as _json
from typing import Any

import requests
from PIL import Image

from src.schemas.models import ApiSettings, PropertyFile, PropertyRecord

# -----------------------------
# Global defaults (edit once)
# -----------------------------

API_URL = "http://api.test"
CEP_URL = "http://cep.test"
PROPERTY_ID = "f0b6c1de-0001"
TYPE_ID = "tp-apto"

CEP_PAYLOAD: dict[str, Any] = {
    "cep": "88350000",
    "state": "SC",
    "city": "Brusque",
    "neighborhood": None,
    "street": None,
    "service": "open-cep",
    "location": {"type": "Point", "coordinates": {"latitude": "-27.0977", "longitude": "-48.9175"}},
}

PROPERTY_TYPES_PAYLOAD: list[dict[str, Any]] = [
    {"id": TYPE_ID, "description": "Apartamento", "createdAt": "2023-02-01T12:00:00.000Z"},
    {"id": "tp-casa", "description": "Casa", "createdAt": "2023-02-01T12:00:00.000Z"},
]


def make_property_payload(files: list[str] | None = None, **overrides: Any) -> dict[str, Any]:
    """`GET /imovel/{id}` body. `files` are storage filenames; paths are derived from them."""
    names = ["a.jpg", "b.png"] if files is None else files
    payload: dict[str, Any] = {
        "id": PROPERTY_ID,
        "name": "Apartamento no Centro",
        "summary": "3 quartos, sacada com churrasqueira",
        "description": "<p>Apartamento amplo e iluminado.</p>",
        "value": "R$450.000,00",
        "bedrooms": 3,
        "bathrooms": 2,
        "suites": 1,
        "parkingSpots": 2,
        "totalArea": "120.5",
        "privateArea": "98",
        "type_property": PROPERTY_TYPES_PAYLOAD[0],
        "cep": "88350000",
        "state": "SC",
        "city": "Brusque",
        "neighborhood": "Centro",
        "street": "Rua Hercílio Luz",
        "numberAddress": "120",
        "latitude": "-27.0977",
        "longitude": "-48.9175",
        "files": [{"id": f"file-{i}", "path": f"{API_URL}/files/{n}", "fileName": n} for i, n in enumerate(names)],
        "createdAt": "2023-03-10T09:30:00.000Z",
    }
    payload.update(overrides)
    return payload


def make_record(files: list[str] | None = None, **overrides: Any) -> PropertyRecord:
    return PropertyRecord.model_validate(make_property_payload(files, **overrides))


def make_property_file(name: str) -> PropertyFile:
    return PropertyFile(path=f"{API_URL}/files/{name}", file_name=name)


def make_settings(**overrides: Any) -> ApiSettings:
    base: dict[str, Any] = {"api_base_url": API_URL, "postal_code_base_url": CEP_URL, "max_workers": 2}
    base.update(overrides)
    return ApiSettings(**base)


def make_form_values(**overrides: Any) -> dict[str, Any]:
    """A complete, valid set of form values (form field names)."""
    values: dict[str, Any] = {
        "name": "Apartamento no Centro",
        "value": "R$450.000,00",
        "summary": "3 quartos",
        "type_id": TYPE_ID,
        "description": "<p>Amplo</p>",
        "bedrooms": "3",
        "bathrooms": "2",
        "suites": "1",
        "parking_spots": "2",
        "total_area": "120.5",
        "private_area": "98",
        "cep": "88350000",
        "state": "SC",
        "city": "Brusque",
        "neighborhood": "Centro",
        "street": "Rua Hercílio Luz",
        "number": "120",
        "latitude": "-27.0977",
        "longitude": "-48.9175",
    }
    values.update(overrides)
    return values


# -----------------------------
# Image helpers
# -----------------------------


def png_bytes(width: int = 64, height: int = 48, color: tuple[int, int, int] = (200, 120, 40)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format="PNG", compress_level=0)
    return buf.getvalue()


# -----------------------------
# Fake HTTP layer
# -----------------------------


def make_response(
    status: int = 200,
    *,
    json: Any = None,
    content: bytes | None = None,
    url: str = API_URL,
) -> requests.Response:
    """Real `requests.Response` with a canned body (no network)."""
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    if content is not None:
        resp._content = content
    elif json is not None:
        resp._content = _json.dumps(json).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = b""
    return resp


class FakeSession(requests.Session):
    """
    Session whose `request` answers from a routing table instead of the network.

    Routes map (METHOD, url) → Response, Exception, or a callable(**kwargs) returning either.
    Every call is recorded in `calls` as (method, url, kwargs).
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        super().__init__()
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def add(self, method: str, url: str, answer: Any) -> None:
        self.routes[(method.upper(), url)] = answer

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        self.calls.append((method.upper(), url, kwargs))
        try:
            answer = self.routes[(method.upper(), url)]
        except KeyError:
            raise requests.ConnectionError(f"no route for {method} {url}") from None
        if callable(answer) and not isinstance(answer, requests.Response):
            answer = answer(**kwargs)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def called(self, method: str | None = None) -> list[tuple[str, str, dict[str, Any]]]:
        return [c for c in self.calls if method is None or c[0] == method.upper()]


# -----------------------------
# UI collaborators
# -----------------------------


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


class RecordingNavigator:
    def __init__(self) -> None:
        self.paths: list[str] = []

    def push(self, path: str) -> None:
        self.paths.append(path)


class StaticSession:
    def __init__(self, status: str = "authenticated") -> None:
        self.status = status
