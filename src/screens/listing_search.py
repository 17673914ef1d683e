# src/screens/listing_search.py
"""
Home-page search banner: property type, city and neighborhood filters.

Choosing a city reloads that city's neighborhoods; `search()` sends the user
to the public results page with only the filters that were filled in.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from src.core.api import ApiError, ListingsApi
from src.core.form import FormState
from src.schemas.models import CityOption, ListingSummary, NeighborhoodOption, PropertyType

from .base import Navigator

logger = logging.getLogger(__name__)

RESULTS_PATH = "/imoveis"

# form field → query parameter, in URL order
SEARCH_PARAMS = (("type_id", "tipoImovel"), ("city", "cidade"), ("neighborhood", "bairro"))


class ListingSearch:
    def __init__(self, api: ListingsApi, navigator: Navigator) -> None:
        self.api = api
        self.navigator = navigator
        self.form = FormState({"type_id": "", "city": "", "neighborhood": ""})
        self.property_types: list[PropertyType] = []
        self.cities: list[CityOption] = []
        self.neighborhoods: list[NeighborhoodOption] = []
        self.recent: list[ListingSummary] = []
        self._sub = self.form.watch("city", self._on_city)

    def load(self, recent_limit: int = 6) -> None:
        """Fetch the selector options and the "recent listings" strip shown under the banner."""
        self.property_types = self.api.list_property_types()
        self.cities = self.api.list_cities()
        self.recent = self.api.list_recent(recent_limit)

    def select(self, name: str, value: str) -> bool:
        return self.form.set_value(name, value)

    def _on_city(self, city: Any) -> None:
        self.form.set_value("neighborhood", "")
        if not city:
            self.neighborhoods = []
            return
        try:
            self.neighborhoods = self.api.list_neighborhoods(city)
        except ApiError as e:
            logger.warning("Could not load neighborhoods for %s: %s", city, e)

    def search_path(self) -> str:
        params = [(param, self.form.get(field)) for field, param in SEARCH_PARAMS if self.form.get(field)]
        return f"{RESULTS_PATH}?{urlencode(params)}" if params else RESULTS_PATH

    def search(self) -> str:
        path = self.search_path()
        self.navigator.push(path)
        return path

    def close(self) -> None:
        self._sub.cancel()
