# src/core/address/resolver.py
"""
Address autofill driven by the CEP field.

Whenever `cep` changes to a value of at least `min_length` characters, one
lookup is issued for that value. A successful result overwrites the address
fields unconditionally; any failure leaves the form untouched and is only
logged, so it never blocks submission.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from src.core.events import Subscription
from src.core.form.schema import ADDRESS_FIELDS
from src.core.form.state import FormState
from src.schemas.models import AddressLookupResult

logger = logging.getLogger(__name__)


class AddressLookup(Protocol):
    def lookup(self, cep: str) -> AddressLookupResult: ...


class AddressResolver:
    def __init__(
        self,
        form: FormState,
        client: AddressLookup,
        *,
        field: str = "cep",
        min_length: int = 8,
    ) -> None:
        self.form = form
        self.client = client
        self.field = field
        self.min_length = min_length
        self.lookups = 0
        self.last_result: AddressLookupResult | None = None
        self._sub: Subscription | None = None

    def attach(self) -> AddressResolver:
        if self._sub is None:
            self._sub = self.form.watch(self.field, self._on_change)
        return self

    def detach(self) -> None:
        if self._sub is not None:
            self._sub.cancel()
            self._sub = None

    @property
    def attached(self) -> bool:
        return self._sub is not None

    def _on_change(self, value: Any) -> None:
        if not isinstance(value, str) or len(value) < self.min_length:
            return
        self.resolve(value)

    def resolve(self, cep: str) -> AddressLookupResult | None:
        """Look up `cep` and copy the result into the form. Returns None on any failure."""
        self.lookups += 1
        try:
            result = self.client.lookup(cep)
        except Exception as e:  # noqa: BLE001
            logger.warning("CEP lookup failed for %s: %s", cep, e)
            return None

        self.last_result = result
        fields = result.as_fields()
        for name in ADDRESS_FIELDS:
            self.form.set_value(name, fields[name])
        logger.debug("CEP %s resolved to %s/%s", cep, result.city, result.state)
        return result
