"""Orchestrate one user's card session: select, generate, save, download, send.

Only one external call is in flight at a time. ``is_loading`` blocks a second
generation while the first runs; nothing can be cancelled once started.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from app.errors import CardServiceError, PersistenceError, ValidationError
from app.models.card import GeneratedCard
from app.schemas import SendEmailRequest
from app.services.card_store import CardStore
from app.services.image_provider import CardGenerator

log = logging.getLogger("vintage-card")

DEFAULT_SENDER_NAME = "A Friend"
GENERATION_FAILED = "Failed to generate poster. Please try again."

EmailDispatch = Callable[[SendEmailRequest], Dict[str, Any]]


@dataclass
class GenerateOutcome:
    image_url: str
    card: GeneratedCard
    saved: bool
    warning: Optional[str] = None


class CardWorkflow:
    def __init__(self, generator: CardGenerator, store: CardStore) -> None:
        self.generator = generator
        self.store = store

        self.selected_image: Optional[bytes] = None
        self.selected_mime_type: Optional[str] = None
        self.result_url: Optional[str] = None
        self.is_loading = False
        self.error: Optional[str] = None

        self.from_name = ""
        self.to_name = ""
        self.to_email = ""
        self.message = ""

    # ---- state ----
    @property
    def can_generate(self) -> bool:
        return self.selected_image is not None and not self.is_loading

    @property
    def can_download(self) -> bool:
        return self.result_url is not None

    @property
    def can_send(self) -> bool:
        return self.result_url is not None and not self.is_loading

    def select_image(self, data: bytes, mime_type: Optional[str] = None) -> None:
        self.selected_image = data
        self.selected_mime_type = mime_type
        self.error = None

    def clear(self) -> None:
        self.selected_image = None
        self.selected_mime_type = None
        self.result_url = None
        self.error = None

    # ---- actions ----
    def generate(self) -> Optional[GenerateOutcome]:
        """Generate the card, then try to save it.

        Returns ``None`` when there is nothing to do. A generation failure is
        recorded in ``error`` and re-raised with the uploaded image left in
        place; a save failure only produces a warning.
        """

        if not self.can_generate:
            return None

        self.is_loading = True
        self.error = None
        try:
            try:
                url = self.generator.generate(self.selected_image, mime_type=self.selected_mime_type)
            except CardServiceError as exc:
                self.error = exc.message or GENERATION_FAILED
                raise
            except Exception:
                log.exception("Unexpected card generation failure")
                self.error = GENERATION_FAILED
                raise
            self.result_url = url

            card = GeneratedCard(
                original_image=self.selected_image,
                result_image_url=url,
                sender_name=self.from_name,
                recipient_name=self.to_name,
                message=self.message,
            )
            try:
                self.store.insert(card)
            except PersistenceError as exc:
                log.warning("Failed to save to history: %s", exc.message)
                return GenerateOutcome(image_url=url, card=card, saved=False, warning=exc.message)
            return GenerateOutcome(image_url=url, card=card, saved=True)
        finally:
            self.is_loading = False

    def download_filename(self) -> str:
        return f"retro-poster-{int(time.time() * 1000)}.png"

    def build_email_request(self) -> SendEmailRequest:
        if not self.result_url:
            raise ValidationError("Please generate a poster first")
        missing = [name for name, value in (("toEmail", self.to_email), ("toName", self.to_name)) if not value]
        if missing:
            raise ValidationError("Please fill in recipient details", missing)
        return SendEmailRequest(
            to_email=self.to_email,
            to_name=self.to_name,
            from_name=self.from_name or DEFAULT_SENDER_NAME,
            message=self.message,
            image=self.result_url,
        )

    def send_email(self, dispatch: EmailDispatch) -> Dict[str, Any]:
        """Send the current card; on failure the generated result stays intact."""

        request = self.build_email_request()
        return dispatch(request)


__all__ = ["CardWorkflow", "GenerateOutcome", "DEFAULT_SENDER_NAME"]
