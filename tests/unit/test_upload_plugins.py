# tests/unit/test_upload_plugins.py
from __future__ import annotations

import io

import pytest
from PIL import Image

from src.core.media import plugins as mod  # access _PLUGINS
from src.core.media.plugins import (
    CROP,
    EXIF_ORIENTATION,
    PLUGIN_ORDER,
    PREVIEW,
    build_preview,
    centered_crop_box,
    register_plugin,
    registered_plugins,
    setup_upload_plugins,
    unregister_plugin,
)


def test_nothing_is_registered_until_setup() -> None:
    assert registered_plugins() == ()


def test_setup_is_idempotent_and_ordered() -> None:
    assert setup_upload_plugins() == PLUGIN_ORDER
    assert setup_upload_plugins() == PLUGIN_ORDER
    assert len(mod._PLUGINS) == 3


def test_setup_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        setup_upload_plugins(("image_filter",))


def test_no_preview_without_preview_plugin(png_bytes) -> None:
    setup_upload_plugins((EXIF_ORIENTATION, CROP))
    assert build_preview(png_bytes(64, 64)) is None


def test_preview_is_bounded_png_with_crop_box(png_bytes) -> None:
    setup_upload_plugins()

    preview = build_preview(png_bytes(1000, 500), max_px=100, aspect_ratio=16 / 9)

    assert preview is not None
    assert (preview.width, preview.height) == (100, 50)
    assert preview.crop_box == (55, 0, 944, 500)
    with Image.open(io.BytesIO(preview.data)) as im:
        assert im.format == "PNG"


def test_undecodable_bytes_yield_no_preview() -> None:
    setup_upload_plugins()
    assert build_preview(b"%PDF-1.7 not an image") is None


def test_extra_plugins_run_after_builtins(monkeypatch, png_bytes) -> None:
    seen: list[str] = []
    monkeypatch.setitem(mod._PLUGINS, "custom", lambda work: seen.append("custom"))
    setup_upload_plugins((PREVIEW,))

    assert registered_plugins() == (PREVIEW, "custom")
    build_preview(png_bytes())
    assert seen == ["custom"]

    unregister_plugin("custom")
    assert "custom" not in registered_plugins()


def test_register_plugin_can_replace_builtin(png_bytes) -> None:
    def tiny(work):
        work.thumbnail = work.image.resize((1, 1))

    register_plugin(PREVIEW, tiny)
    preview = build_preview(png_bytes())
    assert (preview.width, preview.height) == (1, 1)


@pytest.mark.parametrize(
    "size, ratio, box",
    [
        ((1600, 900), 16 / 9, (0, 0, 1600, 900)),
        ((1200, 1200), 2.0, (0, 300, 1200, 900)),
        ((2000, 500), 2.0, (500, 0, 1500, 500)),
    ],
)
def test_centered_crop_box(size, ratio, box) -> None:
    assert centered_crop_box(*size, ratio) == box


def test_centered_crop_box_rejects_degenerate_input() -> None:
    with pytest.raises(ValueError):
        centered_crop_box(0, 10, 1.0)
