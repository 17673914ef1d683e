# src/core/address/__init__.py
from .postal_code import PostalCodeClient
from .resolver import AddressLookup, AddressResolver

__all__ = ["AddressResolver", "AddressLookup", "PostalCodeClient"]
