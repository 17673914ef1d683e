# src/core/form/state.py
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from src.core.events import EventDispatcher, Subscription, field_topic

from .schema import PropertyFormSchema, validate_form

logger = logging.getLogger(__name__)

T = TypeVar("T")

Validator = Callable[[Mapping[str, Any]], tuple[Any, dict[str, str]]]


class FormState:
    """
    In-memory form values + per-field errors.

    Watchers subscribe per field and are notified only when a value actually
    changes. `submit(handler)` validates first and never calls `handler` when
    the schema rejects the values.
    """

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        dispatcher: EventDispatcher | None = None,
        validator: Validator = validate_form,
    ) -> None:
        self.dispatcher = dispatcher or EventDispatcher()
        self._validator = validator
        self._values: dict[str, Any] = dict(values or {})
        self._errors: dict[str, str] = {}

    # ---------- values ----------

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def set_value(self, name: str, value: Any) -> bool:
        """Store a value; returns True (and notifies watchers) if it changed."""
        if name in self._values and self._values[name] == value:
            return False
        self._values[name] = value
        self._errors.pop(name, None)
        self.dispatcher.publish(field_topic(name), value)
        return True

    def set_values(self, values: Mapping[str, Any]) -> list[str]:
        return [name for name, value in values.items() if self.set_value(name, value)]

    def reset(self, values: Mapping[str, Any]) -> None:
        """Replace all values without notifying watchers (initial seeding)."""
        self._values = dict(values)
        self._errors = {}

    def watch(self, name: str, callback: Callable[[Any], None]) -> Subscription:
        return self.dispatcher.subscribe(field_topic(name), callback)

    # ---------- validation ----------

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    def error_for(self, name: str) -> str | None:
        return self._errors.get(name)

    def validate(self) -> PropertyFormSchema | None:
        validated, errors = self._validator(self._values)
        self._errors = errors
        if errors:
            logger.debug("Form validation failed: %s", sorted(errors))
            return None
        return validated

    def submit(self, handler: Callable[[Any], T]) -> T | None:
        validated = self.validate()
        if validated is None:
            return None
        return handler(validated)
