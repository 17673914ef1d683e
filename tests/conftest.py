# tests/conftest.py
from __future__ import annotations

import pytest

from src.core.api import ListingsApi
from src.core.media import plugins
from tests.utils import (
    API_URL,
    PROPERTY_ID,
    PROPERTY_TYPES_PAYLOAD,
    FakeSession,
    RecordingNavigator,
    RecordingNotifier,
    make_property_payload,
    make_response,
    make_settings,
    png_bytes as _make_png,
)


# -------- Global isolation --------
@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep host AUROS_* variables from leaking into settings/logging tests."""
    for name in ("AUROS_API_URL", "AUROS_CEP_URL", "AUROS_TIMEOUT", "AUROS_TOKEN", "AUROS_MAX_WORKERS", "AUROS_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _clean_plugin_registry(monkeypatch):
    """Every test starts with an empty upload-plugin registry."""
    monkeypatch.setattr(plugins, "_PLUGINS", {})
    yield


# -------- Settings & HTTP --------
@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def listings_api(settings, fake_session):
    return ListingsApi(settings, session=fake_session)


@pytest.fixture
def backend(fake_session):
    """
    Fake session pre-loaded with the edit-screen read endpoints.

    Usage:
        backend(files=["a.jpg", "c.pdf"])  → routes record, types, and image bytes
    """

    def _factory(files: list[str] | None = None, **record_overrides):
        payload = make_property_payload(files, **record_overrides)
        fake_session.add("GET", f"{API_URL}/imovel/{PROPERTY_ID}", make_response(json=payload))
        fake_session.add("GET", f"{API_URL}/tipo-imovel", make_response(json=PROPERTY_TYPES_PAYLOAD))
        for f in payload["files"]:
            fake_session.add("GET", f["path"], make_response(content=_make_png(), url=f["path"]))
        return fake_session

    return _factory


# -------- UI collaborators --------
@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def png_bytes():
    """
    Fixture that returns a callable to generate PNG bytes.
    Usage:
        data = png_bytes(64, 64)
    """
    return _make_png


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
