"""
Settings loader for the back-office client.

Goals
-----
- File-first configuration validated by Pydantic (`ApiSettings`).
- Works with no file at all: every field has a default.
- Light environment-variable overrides for CI and local runs.

JSON shape
----------
    {
      "api_base_url": "https://api.example.com",
      "postal_code_base_url": "https://brasilapi.com.br",
      "timeout_s": 10,
      "max_workers": 4
    }

Environment overrides (optional)
--------------------------------
- AUROS_API_URL      -> api_base_url
- AUROS_CEP_URL      -> postal_code_base_url
- AUROS_TIMEOUT      -> timeout_s (float)
- AUROS_TOKEN        -> auth_token
- AUROS_MAX_WORKERS  -> max_workers (int)

Bad numeric values are ignored and the file/default value is kept.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import ValidationError

from src.schemas.models import ApiSettings


@dataclass(frozen=True)
class SettingsLoader:
    """
    Default search (when path=None):
        1) ./config/settings.json
        2) ./settings.json
    Falls back to defaults when neither exists.
    """

    env_prefix: str = "AUROS_"

    def load(self, path: str | Path | None = None) -> ApiSettings:
        p = self._resolve_path(path)
        raw = self._read_json_file(p) if p is not None else {}
        return self._parse(self._apply_env_overrides(raw))

    def load_json(self, text: str) -> ApiSettings:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Settings JSON must be an object")
        return self._parse(self._apply_env_overrides(raw))

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path | None) -> Path | None:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Settings file not found: {p}")
            return p
        for candidate in (Path("config/settings.json"), Path("settings.json")):
            if candidate.exists():
                return candidate
        return None

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported settings format for {p.name}; only .json is supported.")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings in {p} must be a JSON object")
        return cast(dict[str, Any], data)

    def _parse(self, data: dict[str, Any]) -> ApiSettings:
        try:
            return ApiSettings.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Settings validation failed:\n{e}") from e

    def _apply_env_overrides(self, raw: dict[str, Any]) -> dict[str, Any]:
        prefix = self.env_prefix
        data = dict(raw)

        for env, field in (("API_URL", "api_base_url"), ("CEP_URL", "postal_code_base_url"), ("TOKEN", "auth_token")):
            value = os.getenv(f"{prefix}{env}")
            if value:
                data[field] = value

        numeric: tuple[tuple[str, str, Callable[[str], Any]], ...] = (
            ("TIMEOUT", "timeout_s", float),
            ("MAX_WORKERS", "max_workers", int),
        )
        for env, field, cast_fn in numeric:
            value = os.getenv(f"{prefix}{env}")
            if not value:
                continue
            try:
                data[field] = cast_fn(value)
            except ValueError:
                # Ignore bad value; keep the file/default one
                pass
        return data


def load_settings(path: str | Path | None = None) -> ApiSettings:
    """Convenience wrapper for one-shot callers."""
    return SettingsLoader().load(path)
