# src/schemas/models.py

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.normalize.currency import format_brl

# =========================
# Reference data
# =========================


class PropertyType(BaseModel):
    """Listing category (apartamento, casa, terreno...). Read-only, fetched once per screen load."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Identifier used as the record's type_id foreign key.")
    description: str = Field(..., description="Human-readable label shown in the type selector.")
    created_at: datetime | None = Field(None, alias="createdAt", description="Creation timestamp as reported by the API.")


class CityOption(BaseModel):
    """One entry of `GET /imovel/cidades`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    city: str


class NeighborhoodOption(BaseModel):
    """One entry of `GET /imovel/bairro/{city}`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    neighborhood: str


# =========================
# Property record
# =========================


class PropertyFile(BaseModel):
    """An image already persisted in remote storage for a record."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str | None = None
    path: str = Field(..., description="URL/path the image bytes can be fetched from.")
    file_name: str = Field(..., alias="fileName", description="Storage filename, used by delete-images.")


# Counter/area fields arrive as numbers or strings depending on the endpoint.
_STRING_FIELDS = (
    "bedrooms",
    "bathrooms",
    "suites",
    "parking_spots",
    "total_area",
    "private_area",
    "cep",
    "state",
    "city",
    "neighborhood",
    "street",
    "number_address",
    "latitude",
    "longitude",
)


def _price_text(v: Any) -> str:
    """Numeric prices from the API become masked BRL text; strings are kept as typed."""
    if v is None:
        return ""
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return format_brl(Decimal(str(v)))
    return str(v)


class PropertyRecord(BaseModel):
    """
    The persisted listing as returned by `GET /imovel/{id}`.

    Owned by the edit screen for one session; the authoritative copy lives in the
    remote store. Field aliases follow the API's camelCase wire names.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    summary: str = ""
    description: str = Field("", description="Rich-text description serialized as HTML.")
    value: str = Field("", description="Currency-formatted price, e.g. 'R$1.250.000,00'.")

    bedrooms: str = ""
    bathrooms: str = ""
    suites: str = ""
    parking_spots: str = Field("", alias="parkingSpots")
    total_area: str = Field("", alias="totalArea")
    private_area: str = Field("", alias="privateArea")

    type_property: PropertyType | None = None

    cep: str = ""
    state: str = ""
    city: str = ""
    neighborhood: str = ""
    street: str = ""
    number_address: str = Field("", alias="numberAddress")
    latitude: str = ""
    longitude: str = ""

    files: list[PropertyFile] = Field(default_factory=list)
    created_at: datetime | None = Field(None, alias="createdAt")

    @field_validator(*_STRING_FIELDS, mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _price(cls, v: Any) -> str:
        return _price_text(v)

    @property
    def stored_filenames(self) -> list[str]:
        return [f.file_name for f in self.files]


class ListingSummary(BaseModel):
    """Card data for the public "recent listings" strip."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    summary: str = ""
    value: str = ""
    city: str = ""
    neighborhood: str = ""
    files: list[PropertyFile] = Field(default_factory=list)

    @field_validator("city", "neighborhood", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _price(cls, v: Any) -> str:
        return _price_text(v)


# =========================
# Gallery image references
# =========================


class ImagePreview(BaseModel):
    """Client-side preview generated by the upload plugins (never uploaded)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    data: bytes = Field(..., description="PNG-encoded thumbnail.")
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    crop_box: tuple[int, int, int, int] | None = Field(
        None, description="Suggested crop selection (left, upper, right, lower) in source pixels."
    )


class RemoteImage(BaseModel):
    """An image already persisted server-side, not yet materialized locally."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["remote"] = "remote"
    path: str
    filename: str


class LocalImage(BaseModel):
    """An in-memory file pending upload."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: Literal["local"] = "local"
    filename: str
    content_type: str = "application/octet-stream"
    data: bytes = Field(..., repr=False)
    preview: ImagePreview | None = Field(None, repr=False)


ImageRef = Annotated[RemoteImage | LocalImage, Field(discriminator="kind")]


# =========================
# Address lookup
# =========================


class AddressLookupResult(BaseModel):
    """
    Transient result of a postal-code (CEP) lookup.

    Built from the BrasilAPI v2 shape:
        {city, neighborhood, state, street, location: {coordinates: {latitude, longitude}}}
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    city: str
    neighborhood: str
    state: str
    street: str
    latitude: str
    longitude: str

    @field_validator("neighborhood", "street", mode="before")
    @classmethod
    def _city_wide_cep(cls, v: Any) -> Any:
        # City-wide CEPs (e.g. xxxxx-000) come back without street/neighborhood.
        return "" if v is None else v

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AddressLookupResult:
        """Flatten the nested coordinates; raises KeyError/TypeError on malformed bodies."""
        coords = payload["location"]["coordinates"]
        return cls(
            city=payload["city"],
            neighborhood=payload["neighborhood"],
            state=payload["state"],
            street=payload["street"],
            latitude=str(coords["latitude"]),
            longitude=str(coords["longitude"]),
        )

    def as_fields(self) -> dict[str, str]:
        return self.model_dump()


# =========================
# Submission
# =========================


class UploadResult(BaseModel):
    """Response of `POST /files/upload`: storage paths in upload order."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    paths: list[str] = Field(default_factory=list)


SubmissionStatus = Literal["blocked", "busy", "succeeded", "failed"]


class SubmissionOutcome(BaseModel):
    """Terminal result of one save attempt."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: SubmissionStatus
    message: str | None = None
    paths: list[str] = Field(default_factory=list)
    error: str | None = Field(None, description="Exception summary when status == 'failed'.")

    @property
    def ok(self) -> bool:
        return self.status == "succeeded"


# =========================
# Client configuration
# =========================


class ApiSettings(BaseModel):
    """
    Connection and behavior knobs for the back-office client.

    Loaded by `src.inputs.settings.SettingsLoader` (JSON file + AUROS_* env overrides).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    api_base_url: str = Field("http://localhost:3333", description="Base URL of the listings/storage API.")
    postal_code_base_url: str = Field("https://brasilapi.com.br", description="Base URL of the CEP lookup service.")
    timeout_s: float = Field(15.0, gt=0, description="Per-request timeout in seconds.")
    user_agent: str = Field("Auros-Admin/1.0", description="User-Agent header sent on every request.")
    auth_token: str | None = Field(None, description="Bearer token for authenticated API calls.")

    max_workers: int = Field(4, ge=1, le=32, description="Concurrent fetches when seeding the gallery.")
    postal_code_min_length: int = Field(8, ge=1, description="CEP length that triggers an address lookup.")
    crop_aspect_ratio: str = Field("16:9", description="Aspect ratio used for the suggested crop selection.")
    preview_max_px: int = Field(320, ge=16, description="Longest side of generated previews.")

    @field_validator("api_base_url", "postal_code_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("crop_aspect_ratio")
    @classmethod
    def _ratio_shape(cls, v: str) -> str:
        parts = v.split(":")
        if len(parts) != 2 or not all(p.strip().isdigit() and int(p) > 0 for p in parts):
            raise ValueError("crop_aspect_ratio must look like 'W:H' with positive integers")
        return v

    @property
    def crop_ratio(self) -> float:
        w, h = (int(p) for p in self.crop_aspect_ratio.split(":"))
        return w / h
