from __future__ import annotations

from .currency import PREFIX, format_brl, normalize_brl, parse_brl

__all__ = ["PREFIX", "format_brl", "normalize_brl", "parse_brl"]
