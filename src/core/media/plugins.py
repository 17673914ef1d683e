# src/core/media/plugins.py
"""
Capability registry for the gallery upload widget.

The widget's behaviors (EXIF orientation, preview thumbnails, crop selection)
are named plugins kept in a process-wide registry. Nothing is registered at
import time: the host calls `setup_upload_plugins()` once during bootstrap.
Without it, local images are still accepted but carry no preview.

Tests can register/unregister entries directly (monkeypatch `_PLUGINS`).
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from src.schemas.models import ImagePreview

logger = logging.getLogger(__name__)

EXIF_ORIENTATION = "image_exif_orientation"
PREVIEW = "image_preview"
CROP = "image_crop"

# Application order when several plugins are registered.
PLUGIN_ORDER: tuple[str, ...] = (EXIF_ORIENTATION, CROP, PREVIEW)


@dataclass
class PreviewWork:
    """Mutable state threaded through the plugins for one image."""

    image: Image.Image
    max_px: int = 320
    aspect_ratio: float = 16 / 9
    crop_box: tuple[int, int, int, int] | None = None
    thumbnail: Image.Image | None = None


PluginFn = Callable[[PreviewWork], None]

_PLUGINS: dict[str, PluginFn] = {}


# =========================
# Built-in plugins
# =========================


def _exif_orientation(work: PreviewWork) -> None:
    work.image = ImageOps.exif_transpose(work.image)


def centered_crop_box(width: int, height: int, aspect_ratio: float) -> tuple[int, int, int, int]:
    """Largest centered box with the given aspect ratio that fits inside width x height."""
    if width <= 0 or height <= 0 or aspect_ratio <= 0:
        raise ValueError("width, height and aspect_ratio must be positive")
    if width / height > aspect_ratio:
        crop_w, crop_h = round(height * aspect_ratio), height
    else:
        crop_w, crop_h = width, round(width / aspect_ratio)
    left = (width - crop_w) // 2
    upper = (height - crop_h) // 2
    return (left, upper, left + crop_w, upper + crop_h)


def _crop_selection(work: PreviewWork) -> None:
    work.crop_box = centered_crop_box(work.image.width, work.image.height, work.aspect_ratio)


def _preview(work: PreviewWork) -> None:
    thumb = work.image.copy()
    thumb.thumbnail((work.max_px, work.max_px))
    work.thumbnail = thumb


BUILTIN_PLUGINS: dict[str, PluginFn] = {
    EXIF_ORIENTATION: _exif_orientation,
    CROP: _crop_selection,
    PREVIEW: _preview,
}


# =========================
# Registry API
# =========================


def register_plugin(name: str, fn: PluginFn) -> None:
    _PLUGINS[name] = fn


def unregister_plugin(name: str) -> None:
    _PLUGINS.pop(name, None)


def registered_plugins() -> tuple[str, ...]:
    known = [n for n in PLUGIN_ORDER if n in _PLUGINS]
    extra = [n for n in _PLUGINS if n not in PLUGIN_ORDER]
    return tuple(known + extra)


def setup_upload_plugins(names: tuple[str, ...] = PLUGIN_ORDER) -> tuple[str, ...]:
    """Register the built-in plugins (idempotent). Returns the registered names."""
    for name in names:
        if name not in BUILTIN_PLUGINS:
            raise ValueError(f"Unknown upload plugin: {name!r}")
        _PLUGINS.setdefault(name, BUILTIN_PLUGINS[name])
    logger.debug("Upload plugins ready: %s", ", ".join(registered_plugins()))
    return registered_plugins()


def build_preview(data: bytes, *, max_px: int = 320, aspect_ratio: float = 16 / 9) -> ImagePreview | None:
    """
    Run the registered plugins over the image bytes.

    Returns None when no preview plugin is registered or the bytes are not a
    decodable image (the file itself is still kept in the gallery).
    """
    if PREVIEW not in _PLUGINS:
        return None
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            work = PreviewWork(image=im.copy(), max_px=max_px, aspect_ratio=aspect_ratio)
    except (UnidentifiedImageError, OSError) as e:
        logger.debug("Preview skipped: %s", e)
        return None

    for name in registered_plugins():
        _PLUGINS[name](work)

    thumb = work.thumbnail or work.image
    if thumb.mode not in ("1", "L", "LA", "P", "RGB", "RGBA"):
        thumb = thumb.convert("RGB")
    buf = io.BytesIO()
    thumb.save(buf, format="PNG")
    return ImagePreview(data=buf.getvalue(), width=thumb.width, height=thumb.height, crop_box=work.crop_box)
