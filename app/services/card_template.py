"""Fill the greeting-card email template.

The static HTML asset marks four regions:

* ``[Recipient Name]`` and ``[Sender Name]`` tokens, replaced everywhere;
* ``<!-- IMAGE_START --> ... <!-- IMAGE_END -->`` and
  ``<!-- MESSAGE_START --> ... <!-- MESSAGE_END -->`` blocks, replaced once,
  delimiters included.

Because the block delimiters are consumed, rendering is a one-shot transform:
running it again on its own output only re-applies the (already gone) tokens.
"""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Dict, List

from app.errors import ValidationError

CARD_IMAGE_CID = "card-image"
CARD_IMAGE_FILENAME = "card.png"
_DATA_IMAGE_PREFIX = "data:image"

IMAGE_FRAGMENT = """
            <div class="image-frame" style="padding: 0; background: none; border: 3px double #1C4E4F; border-radius: 16px; overflow: hidden;">
                <img src="{src}" alt="Vintage Card" style="width: 100%; height: auto; display: block; border-radius: 14px;" />
            </div>
        """

MESSAGE_FRAGMENT = """
            <div class="lines-container" style="background-color: rgba(249, 249, 249, 0.6); border-radius: 8px; padding: 15px; margin-top: 10px;">
                <div style="font-family: 'Handwritten', cursive; font-size: 18px; font-weight: 600; color: #1C4E4F; line-height: 1.6; text-align: center; text-shadow: 1px 1px 0px rgba(232, 220, 202, 0.5);">
                    {message}
                </div>
            </div>
        """


@dataclass(frozen=True)
class EmailAttachment:
    filename: str
    content: bytes
    content_id: str


@dataclass
class RenderedEmail:
    html: str
    attachments: List[EmailAttachment] = field(default_factory=list)


@dataclass(frozen=True)
class TokenSlot:
    """A bracketed token replaced at every occurrence."""

    token: str

    def fill(self, document: str, value: str) -> str:
        return document.replace(self.token, value)


@dataclass(frozen=True)
class BlockSlot:
    """A region between two HTML comments; the first match is replaced whole."""

    start: str
    end: str

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(
            re.escape(f"<!-- {self.start} -->") + r"[\s\S]*?" + re.escape(f"<!-- {self.end} -->")
        )

    def fill(self, document: str, fragment: str) -> str:
        # callable replacement keeps backslashes in user text literal
        return self.pattern.sub(lambda _match: fragment, document, count=1)


TOKEN_SLOTS: Dict[str, TokenSlot] = {
    "recipient_name": TokenSlot("[Recipient Name]"),
    "sender_name": TokenSlot("[Sender Name]"),
}

BLOCK_SLOTS: Dict[str, BlockSlot] = {
    "image": BlockSlot("IMAGE_START", "IMAGE_END"),
    "message": BlockSlot("MESSAGE_START", "MESSAGE_END"),
}


def is_data_image(source: str) -> bool:
    return source.startswith(_DATA_IMAGE_PREFIX)


def attachment_from_data_uri(data_uri: str) -> EmailAttachment:
    """Decode a ``data:image/...;base64,`` string into the inline card attachment."""

    encoded = data_uri.split(";base64,")[-1]
    try:
        content = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"image is not valid base64: {exc}") from exc
    return EmailAttachment(
        filename=CARD_IMAGE_FILENAME,
        content=content,
        content_id=CARD_IMAGE_CID,
    )


class CardTemplate:
    """A base HTML document with named slots for the card email."""

    def __init__(self, source: str) -> None:
        self.source = source

    def render(
        self,
        *,
        recipient_name: str,
        sender_name: str,
        message: str,
        image_src: str,
    ) -> RenderedEmail:
        html = self.source
        attachments: List[EmailAttachment] = []

        html = TOKEN_SLOTS["recipient_name"].fill(html, recipient_name)
        html = TOKEN_SLOTS["sender_name"].fill(html, sender_name)

        src = image_src
        if is_data_image(image_src):
            attachment = attachment_from_data_uri(image_src)
            attachments.append(attachment)
            src = f"cid:{attachment.content_id}"
        html = BLOCK_SLOTS["image"].fill(html, IMAGE_FRAGMENT.format(src=src))

        body = message.replace("\n", "<br/>")
        html = BLOCK_SLOTS["message"].fill(html, MESSAGE_FRAGMENT.format(message=body))

        return RenderedEmail(html=html, attachments=attachments)


def render_card_email(
    base_html: str,
    *,
    recipient_name: str,
    sender_name: str,
    message: str,
    image_src: str,
) -> RenderedEmail:
    return CardTemplate(base_html).render(
        recipient_name=recipient_name,
        sender_name=sender_name,
        message=message,
        image_src=image_src,
    )


__all__ = [
    "CARD_IMAGE_CID",
    "CARD_IMAGE_FILENAME",
    "BlockSlot",
    "CardTemplate",
    "EmailAttachment",
    "RenderedEmail",
    "TokenSlot",
    "attachment_from_data_uri",
    "is_data_image",
    "render_card_email",
]
