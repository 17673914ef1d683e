# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_record, make_form_values
"""

from .utils import make_form_values, make_property_payload, make_record

__all__ = ["make_record", "make_form_values", "make_property_payload"]
