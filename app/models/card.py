"""The record kept for every successfully generated card."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

CARD_STYLE = "1920s"


def _or_none(value: Optional[str]) -> Optional[str]:
    return value or None


@dataclass(frozen=True)
class GeneratedCard:
    """One generation result. Created once, never updated by the service."""

    original_image: bytes
    result_image_url: str
    sender_name: Optional[str] = None
    recipient_name: Optional[str] = None
    message: Optional[str] = None
    style: str = CARD_STYLE

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for the ``cards`` table; blank fields become NULL."""

        return {
            "sender_name": _or_none(self.sender_name),
            "recipient_name": _or_none(self.recipient_name),
            "message": _or_none(self.message),
            "image_url": self.result_image_url,
            "style": self.style,
        }
