# src/orchestrators/submission.py
"""
Save pipeline for the property edit screen.

One attempt is strictly sequential and never parallel:
  1) guard: empty gallery → blocked, no network call
  2) delete previously stored images (failure is logged and ignored)
  3) upload the whole gallery as one multipart request → storage paths
  4) PUT the record with the validated fields + those paths, in upload order
  5) notify + navigate back to the listing index

Any failure in 3-4 is logged, surfaced as a generic toast and ends the
attempt; nothing is retried or rolled back. With `compensate_orphans=True`
a persist failure triggers a best-effort delete of the files just uploaded.
"""

from __future__ import annotations

import logging
import posixpath
from enum import Enum
from typing import Protocol
from urllib.parse import urlparse

from src.core.form.schema import PropertyFormSchema
from src.core.form.state import FormState
from src.core.media.gallery import ImageGallery
from src.schemas.models import PropertyRecord, SubmissionOutcome, UploadResult
from src.screens.base import PROPERTY_INDEX_PATH, Navigator, Notifier

logger = logging.getLogger(__name__)

EMPTY_GALLERY_MESSAGE = "Para continuar precisa ter ao menos uma imagem"
SUCCESS_MESSAGE = "Imóvel alterado com sucesso"
FAILURE_MESSAGE = "Não foi possível salvar o imóvel"
FORM_ERRORS_MESSAGE = "Verifique os campos obrigatórios"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BLOCKED = "blocked"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    NAVIGATED = "navigated"
    FAILED = "failed"


class PropertyStore(Protocol):
    """The subset of `ListingsApi` the pipeline calls."""

    def delete_images(self, filenames: list[str]) -> None: ...

    def upload_images(self, parts: list[tuple[str, tuple[str, bytes, str]]]) -> UploadResult: ...

    def update_property(self, property_id: str, payload: dict) -> object: ...


def storage_filename(path: str) -> str:
    """'https://cdn/x/abc.jpg' or 'uploads/abc.jpg' → 'abc.jpg'."""
    return posixpath.basename(urlparse(path).path)


class SubmissionOrchestrator:
    def __init__(
        self,
        api: PropertyStore,
        notifier: Notifier,
        navigator: Navigator,
        *,
        return_path: str = PROPERTY_INDEX_PATH,
        compensate_orphans: bool = False,
    ) -> None:
        self.api = api
        self.notifier = notifier
        self.navigator = navigator
        self.return_path = return_path
        self.compensate_orphans = compensate_orphans
        self.state = SubmissionState.IDLE
        self.history: list[SubmissionState] = [SubmissionState.IDLE]
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while a save is in flight; the host shows a busy overlay and disables submit."""
        return self._busy

    # ---------- entry points ----------

    def submit(self, record: PropertyRecord, form: FormState, gallery: ImageGallery) -> SubmissionOutcome:
        """Validate the form, then save. Schema errors stay field-level; no network call is made."""
        if self._busy:
            return SubmissionOutcome(status="busy")
        self._to(SubmissionState.VALIDATING)
        outcome = form.submit(lambda validated: self.save(record, validated, gallery))
        if outcome is None:
            self._to(SubmissionState.BLOCKED)
            self._to(SubmissionState.IDLE)
            return SubmissionOutcome(status="blocked", message=FORM_ERRORS_MESSAGE)
        return outcome

    def save(self, record: PropertyRecord, values: PropertyFormSchema, gallery: ImageGallery) -> SubmissionOutcome:
        if self._busy:
            return SubmissionOutcome(status="busy")

        if self.state is not SubmissionState.VALIDATING:
            self._to(SubmissionState.VALIDATING)
        if gallery.is_empty:
            self.notifier.error(EMPTY_GALLERY_MESSAGE)
            self._to(SubmissionState.BLOCKED)
            self._to(SubmissionState.IDLE)
            return SubmissionOutcome(status="blocked", message=EMPTY_GALLERY_MESSAGE)

        self._busy = True
        self._to(SubmissionState.IN_FLIGHT)
        try:
            paths = self._run(record, values, gallery)
        except Exception as e:  # noqa: BLE001
            logger.exception("Saving property %s failed", record.id)
            self.notifier.error(FAILURE_MESSAGE)
            self._to(SubmissionState.FAILED)
            self._to(SubmissionState.IDLE)
            return SubmissionOutcome(status="failed", message=FAILURE_MESSAGE, error=f"{type(e).__name__}: {e}")
        finally:
            self._busy = False

        self._to(SubmissionState.SUCCEEDED)
        self.notifier.success(SUCCESS_MESSAGE)
        self.navigator.push(self.return_path)
        self._to(SubmissionState.NAVIGATED)
        return SubmissionOutcome(status="succeeded", message=SUCCESS_MESSAGE, paths=paths)

    # ---------- pipeline ----------

    def _run(self, record: PropertyRecord, values: PropertyFormSchema, gallery: ImageGallery) -> list[str]:
        if record.files:
            try:
                self.api.delete_images(record.stored_filenames)
            except Exception as e:  # noqa: BLE001
                logger.warning("Deleting stored images of %s failed, continuing: %s", record.id, e)

        uploaded = self.api.upload_images(gallery.as_upload_parts())
        paths = list(uploaded.paths)

        payload = values.to_payload()
        payload["files"] = paths
        try:
            self.api.update_property(record.id, payload)
        except Exception:
            if self.compensate_orphans:
                self._delete_orphans(paths)
            raise
        return paths

    def _delete_orphans(self, paths: list[str]) -> None:
        names = [storage_filename(p) for p in paths]
        try:
            self.api.delete_images(names)
            logger.info("Removed %d orphaned upload(s) after a failed save", len(names))
        except Exception as e:  # noqa: BLE001
            logger.warning("Could not remove orphaned uploads %s: %s", names, e)

    def _to(self, state: SubmissionState) -> None:
        self.state = state
        self.history.append(state)
