# src/core/form/__init__.py

from .schema import (
    ADDRESS_FIELDS,
    REQUIRED_MESSAGES,
    PropertyFormSchema,
    form_values_from_record,
    validate_form,
)
from .state import FormState

__all__ = [
    "FormState",
    "PropertyFormSchema",
    "validate_form",
    "form_values_from_record",
    "REQUIRED_MESSAGES",
    "ADDRESS_FIELDS",
]
