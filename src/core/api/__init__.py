# src/core/api/__init__.py
from .client import ListingsApi, UploadPart
from .errors import (
    API_ERRORS,
    ApiError,
    HttpStatusError,
    InvalidResponseError,
    NetworkError,
    PostalCodeLookupError,
    api_error_guard,
    classify_api_error,
)
from .http import HttpClient

__all__ = [
    "ListingsApi",
    "UploadPart",
    "HttpClient",
    "ApiError",
    "NetworkError",
    "HttpStatusError",
    "InvalidResponseError",
    "PostalCodeLookupError",
    "API_ERRORS",
    "classify_api_error",
    "api_error_guard",
]
