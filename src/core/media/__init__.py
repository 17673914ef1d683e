# src/core/media/__init__.py
from .gallery import GalleryItem, ImageGallery, content_type_for, match_image_extension
from .plugins import (
    PLUGIN_ORDER,
    build_preview,
    centered_crop_box,
    register_plugin,
    registered_plugins,
    setup_upload_plugins,
    unregister_plugin,
)

__all__ = [
    "ImageGallery",
    "GalleryItem",
    "match_image_extension",
    "content_type_for",
    "setup_upload_plugins",
    "register_plugin",
    "unregister_plugin",
    "registered_plugins",
    "build_preview",
    "centered_crop_box",
    "PLUGIN_ORDER",
]
