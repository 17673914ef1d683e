# src/core/form/schema.py
"""
Declarative rule set for the property edit form.

Required fields must be present and non-blank; `number` is optional; room and
area counters are free strings (numbers from the API are stringified). Error
messages are the ones shown next to each field in the back office.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.schemas.models import PropertyRecord

REQUIRED_MESSAGES: dict[str, str] = {
    "name": "Nome é obrigatório",
    "value": "Valor é obrigatório",
    "summary": "Resumo é obrigatório",
    "type_id": "Tipo do imóvel é obrigatório",
    "description": "Descrição é obrigatório",
    "cep": "CEP é obrigatório",
    "state": "Estado é obrigatório",
    "city": "Cidade é obrigatório",
    "neighborhood": "Bairro é obrigatório",
    "street": "Rua é obrigatório",
    "latitude": "Latitude é obrigatório",
    "longitude": "Longitude é obrigatório",
}

COUNTER_FIELDS = ("bedrooms", "bathrooms", "suites", "parking_spots", "total_area", "private_area")

# Fields the CEP lookup is allowed to overwrite.
ADDRESS_FIELDS = ("city", "neighborhood", "state", "street", "latitude", "longitude")


class PropertyFormSchema(BaseModel):
    """Validated form payload. Dumped `by_alias` it is the body of `PUT /imovel/{id}` (minus `files`)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    name: str
    value: str
    summary: str
    type_id: str
    description: str

    bedrooms: str = ""
    bathrooms: str = ""
    suites: str = ""
    parking_spots: str = Field("", alias="parkingSpots")
    total_area: str = Field("", alias="totalArea")
    private_area: str = Field("", alias="privateArea")

    cep: str
    state: str
    city: str
    neighborhood: str
    street: str
    number: str | None = None
    latitude: str
    longitude: str

    @field_validator(*REQUIRED_MESSAGES, mode="before")
    @classmethod
    def _not_blank(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None  # reported as a type error → mapped to the required message
        return v

    @field_validator("number", mode="before")
    @classmethod
    def _optional_number(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(*COUNTER_FIELDS, mode="before")
    @classmethod
    def _counter(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    def to_payload(self) -> dict[str, Any]:
        # an empty house number is left out of the body, not sent as null
        return self.model_dump(by_alias=True, exclude_none=True)


def validate_form(values: Mapping[str, Any]) -> tuple[PropertyFormSchema | None, dict[str, str]]:
    """
    Run the schema over raw form values.

    Returns (validated, {}) on success or (None, {field: message}) on failure.
    Only the first error per field is kept.
    """
    try:
        return PropertyFormSchema.model_validate(dict(values)), {}
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc") or ("__root__",)
            name = str(loc[0])
            if name in errors:
                continue
            errors[name] = REQUIRED_MESSAGES.get(name, err.get("msg", "Valor inválido"))
        return None, errors


def form_values_from_record(record: PropertyRecord) -> dict[str, Any]:
    """Initial form values for an existing record (API names → form names)."""
    return {
        "name": record.name,
        "value": record.value,
        "summary": record.summary,
        "type_id": record.type_property.id if record.type_property else "",
        "description": record.description,
        "bedrooms": record.bedrooms,
        "bathrooms": record.bathrooms,
        "suites": record.suites,
        "parking_spots": record.parking_spots,
        "total_area": record.total_area,
        "private_area": record.private_area,
        "cep": record.cep,
        "state": record.state,
        "city": record.city,
        "neighborhood": record.neighborhood,
        "street": record.street,
        "number": record.number_address,
        "latitude": record.latitude,
        "longitude": record.longitude,
    }
