# src/screens/edit_property.py
"""
Controller for the admin "edit property" screen.

Owns one edit session: the record loaded from the API, the form state, the
gallery working set, the description editor and the CEP autofill wiring.
The host UI renders from these objects and forwards user input to them.
"""

from __future__ import annotations

import logging
from functools import partial

from src.core.address import AddressLookup, AddressResolver
from src.core.api import ApiError, ListingsApi
from src.core.editor import RichTextEditor
from src.core.events import EventDispatcher
from src.core.form import FormState, form_values_from_record
from src.core.media import ImageGallery, build_preview
from src.core.normalize import normalize_brl
from src.orchestrators.submission import SubmissionOrchestrator, SubmissionState
from src.schemas.models import ApiSettings, PropertyRecord, PropertyType, SubmissionOutcome

from .base import LOGIN_PATH, Navigator, Notifier, SessionProvider

logger = logging.getLogger(__name__)


class EditPropertyScreen:
    def __init__(
        self,
        api: ListingsApi,
        postal_codes: AddressLookup,
        notifier: Notifier,
        navigator: Navigator,
        session: SessionProvider,
        *,
        settings: ApiSettings | None = None,
        compensate_orphans: bool = False,
    ) -> None:
        self.api = api
        self.postal_codes = postal_codes
        self.notifier = notifier
        self.navigator = navigator
        self.session = session
        self.settings = settings or ApiSettings()

        self.dispatcher = EventDispatcher()
        self.form = FormState(dispatcher=self.dispatcher)
        self.gallery = ImageGallery(
            self.dispatcher,
            max_workers=self.settings.max_workers,
            preview=partial(
                build_preview,
                max_px=self.settings.preview_max_px,
                aspect_ratio=self.settings.crop_ratio,
            ),
        )
        self.orchestrator = SubmissionOrchestrator(api, notifier, navigator, compensate_orphans=compensate_orphans)
        self.resolver = AddressResolver(
            self.form, postal_codes, min_length=self.settings.postal_code_min_length
        )

        self.record: PropertyRecord | None = None
        self.property_types: list[PropertyType] = []
        self.editor: RichTextEditor | None = None

    @property
    def busy(self) -> bool:
        return self.orchestrator.busy

    @property
    def submission_state(self) -> SubmissionState:
        return self.orchestrator.state

    # ---------- lifecycle ----------

    def open(self, property_id: str) -> bool:
        """
        Load the record and prepare the session.

        Returns False without touching the API when the user is not signed in
        (redirecting to the login screen when the session is known to be anonymous).
        Record/type load errors propagate; a failing image fetch only leaves
        the gallery empty.
        """
        status = self.session.status
        if status != "authenticated":
            if status == "unauthenticated":
                self.navigator.push(LOGIN_PATH)
            return False

        record = self.api.get_property(property_id)
        self.property_types = self.api.list_property_types()
        self.record = record

        values = form_values_from_record(record)
        if values["value"]:
            values["value"] = normalize_brl(values["value"])
        self.form.reset(values)
        self.resolver.attach()

        try:
            seeded = self.gallery.load_remote(record.files, self.api.fetch_image)
        except ApiError as e:
            logger.warning("Could not load stored images of %s: %s", record.id, e)
        else:
            logger.debug("Seeded %d image(s) for %s", seeded, record.id)

        self.editor = RichTextEditor(record.description, on_blur=partial(self.form.set_value, "description"))
        return True

    def close(self) -> None:
        self.resolver.detach()

    # ---------- user actions ----------

    def set_value(self, name: str, value: object) -> bool:
        if name == "value" and isinstance(value, str):
            value = normalize_brl(value)
        return self.form.set_value(name, value)

    def submit(self) -> SubmissionOutcome:
        if self.record is None:
            raise RuntimeError("open() must succeed before submit()")
        if self.editor is not None:
            self.editor.blur()
        return self.orchestrator.submit(self.record, self.form, self.gallery)
