# src/core/media/gallery.py
"""
Ordered working set of gallery images for the edit screen.

- Seeding: stored files whose path ends in a known image extension are
  fetched concurrently (fan-out) and joined (fan-in) into local images, in the
  record's original order. Other files are dropped without being fetched.
- Mutation: add / remove / move / replace always swap the whole tuple and
  publish the full ordered list on `gallery:changed`.
- Upload: the tuple order is the upload order. Every entry must be local by
  then; remote references are materialized first.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import TypeAdapter

from src.core.events import GALLERY_CHANGED, EventDispatcher
from src.schemas.models import ImagePreview, ImageRef, LocalImage, PropertyFile, RemoteImage

from .plugins import build_preview

logger = logging.getLogger(__name__)

_IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

GalleryItem = RemoteImage | LocalImage
FetchFn = Callable[[str], bytes]
PreviewFn = Callable[[bytes], ImagePreview | None]

_ITEMS = TypeAdapter(list[ImageRef])


def match_image_extension(name: str) -> str | None:
    """'a.JPG' → 'jpg'; None when the name does not end in a known image extension."""
    m = _IMAGE_EXT_RE.search(name or "")
    return m.group(1).lower() if m else None


def content_type_for(name: str) -> str:
    ext = match_image_extension(name)
    if ext:
        return f"image/{ext}"
    guessed, _ = mimetypes.guess_type(name)
    return guessed or "application/octet-stream"


class ImageGallery:
    def __init__(
        self,
        dispatcher: EventDispatcher | None = None,
        *,
        max_workers: int = 4,
        preview: PreviewFn | None = build_preview,
    ) -> None:
        self.dispatcher = dispatcher or EventDispatcher()
        self.max_workers = max_workers
        self._preview = preview
        self._items: tuple[GalleryItem, ...] = ()

    # ---------- read ----------

    @property
    def items(self) -> tuple[GalleryItem, ...]:
        return self._items

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def filenames(self) -> list[str]:
        return [item.filename for item in self._items]

    # ---------- seeding ----------

    def load_remote(self, files: Sequence[PropertyFile], fetch: FetchFn) -> int:
        """
        Seed the working set from a record's stored files.

        Returns the number of images seeded. When nothing matches an image
        extension the current working set is left untouched. Fetch errors
        propagate and leave the working set untouched as well.
        """
        refs = [RemoteImage(path=f.path, filename=f.file_name) for f in files if match_image_extension(f.path)]
        skipped = len(files) - len(refs)
        if skipped:
            logger.debug("Skipping %d stored file(s) without an image extension", skipped)
        if not refs:
            return 0

        seeded = self.materialize(refs, fetch)
        self._set(seeded)
        return len(seeded)

    def materialize(self, items: Iterable[GalleryItem], fetch: FetchFn) -> list[LocalImage]:
        """Turn every RemoteImage into a LocalImage (concurrent fetches, original order)."""
        items = list(items)
        remote_paths = [it.path for it in items if isinstance(it, RemoteImage)]
        fetched: dict[str, bytes] = {}
        if remote_paths:
            workers = max(1, min(self.max_workers, len(remote_paths)))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # map() yields in submission order regardless of completion order
                fetched = dict(zip(remote_paths, pool.map(fetch, remote_paths), strict=True))

        out: list[LocalImage] = []
        for it in items:
            if isinstance(it, LocalImage):
                out.append(it)
            elif isinstance(it, RemoteImage):
                out.append(self._local(it.filename, fetched[it.path], content_type_for(it.path)))
            else:
                raise TypeError(f"Unsupported gallery item: {type(it).__name__}")
        return out

    # ---------- mutation ----------

    def add(self, filename: str, data: bytes, content_type: str | None = None) -> LocalImage:
        item = self._local(filename, data, content_type or content_type_for(filename))
        self._set((*self._items, item))
        return item

    def add_file(self, path: str | Path) -> LocalImage:
        p = Path(path)
        return self.add(p.name, p.read_bytes())

    def remove(self, index: int) -> GalleryItem:
        items = list(self._items)
        removed = items.pop(index)
        self._set(items)
        return removed

    def move(self, src: int, dst: int) -> None:
        items = list(self._items)
        if not 0 <= dst < len(items):
            raise IndexError(f"destination index {dst} out of range")
        item = items.pop(src)
        items.insert(dst, item)
        self._set(items)

    def replace(self, items: Iterable[GalleryItem | dict]) -> None:
        """Adopt the full ordered list reported by the upload widget (models or `kind`-tagged dicts)."""
        self._set(_ITEMS.validate_python(list(items)))

    def clear(self) -> None:
        self._set(())

    # ---------- upload ----------

    def as_upload_parts(self) -> list[tuple[str, tuple[str, bytes, str]]]:
        """Multipart parts (`files` field) in gallery order."""
        parts: list[tuple[str, tuple[str, bytes, str]]] = []
        for it in self._items:
            if isinstance(it, LocalImage):
                parts.append(("files", (it.filename, it.data, it.content_type)))
            elif isinstance(it, RemoteImage):
                raise ValueError(f"Remote image {it.filename!r} must be materialized before upload")
            else:
                raise TypeError(f"Unsupported gallery item: {type(it).__name__}")
        return parts

    # ---------- internals ----------

    def _local(self, filename: str, data: bytes, content_type: str) -> LocalImage:
        preview = self._preview(data) if self._preview is not None else None
        return LocalImage(filename=filename, data=data, content_type=content_type, preview=preview)

    def _set(self, items: Iterable[GalleryItem]) -> None:
        self._items = tuple(items)
        self.dispatcher.publish(GALLERY_CHANGED, self._items)
