"""
Typed errors + utilities for the listings/storage and CEP HTTP clients.

Exports
-------
- ApiError, NetworkError, HttpStatusError, InvalidResponseError, PostalCodeLookupError
- API_ERRORS
- classify_api_error(exc)
- api_error_guard()
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import requests
from pydantic import ValidationError

# =========================
# Exception types
# =========================


class ApiError(RuntimeError):
    """Base class for failures talking to the remote API."""


class NetworkError(ApiError):
    """Transport failure (DNS, connection reset, timeout) before a response was read."""


class HttpStatusError(ApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class InvalidResponseError(ApiError):
    """A 2xx response whose body does not have the expected shape."""


class PostalCodeLookupError(ApiError):
    """The CEP service could not resolve the given postal code."""


# Selector tuple for grouped exception handling
API_ERRORS = (
    NetworkError,
    HttpStatusError,
    InvalidResponseError,
    PostalCodeLookupError,
)

# =========================
# Classification helpers
# =========================


def classify_api_error(exc: Exception) -> ApiError:
    """
    Map arbitrary exceptions raised while calling the API to a typed ApiError subclass.

    Heuristics:
      - Any ApiError subclass → passed through
      - requests.HTTPError with a response → HttpStatusError
      - requests.JSONDecodeError → InvalidResponseError
      - other requests.* errors → NetworkError
      - pydantic ValidationError, ValueError (bad JSON), KeyError/TypeError (missing keys) → InvalidResponseError
      - Fallback → ApiError
    """
    if isinstance(exc, ApiError):
        return exc

    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        resp = exc.response
        return HttpStatusError(f"HTTP {resp.status_code} for {resp.url}", status_code=resp.status_code, url=resp.url)

    if isinstance(exc, requests.JSONDecodeError):
        return InvalidResponseError(f"Response body is not JSON: {exc}")

    if isinstance(exc, requests.RequestException):
        return NetworkError(f"{type(exc).__name__}: {exc}")

    if isinstance(exc, (ValidationError, ValueError, KeyError, TypeError)):
        return InvalidResponseError(f"{type(exc).__name__}: {exc}")

    return ApiError(f"{type(exc).__name__}: {exc}")


@contextmanager
def api_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from client internals."""
    try:
        yield
    except API_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_api_error(exc) from exc


__all__ = [
    "ApiError",
    "NetworkError",
    "HttpStatusError",
    "InvalidResponseError",
    "PostalCodeLookupError",
    "API_ERRORS",
    "classify_api_error",
    "api_error_guard",
]
