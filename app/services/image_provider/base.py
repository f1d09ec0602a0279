from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol, Tuple

from PIL import Image, UnidentifiedImageError

from app.errors import ValidationError


class CardGenerator(Protocol):
    def generate(self, image_bytes: bytes, *, mime_type: Optional[str] = None) -> str:
        """Return the stylised card as a data URI or a remote URL."""
        ...


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    mime_type: str


def describe_image(image_bytes: bytes, mime_type: Optional[str] = None) -> ImageInfo:
    """Read intrinsic dimensions (and the MIME type when not supplied) with Pillow."""

    if not image_bytes:
        raise ValidationError("image is empty")
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            width, height = img.size
            detected = Image.MIME.get(img.format or "", None)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError(f"Unsupported image data: {exc}") from exc
    return ImageInfo(
        width=width,
        height=height,
        mime_type=mime_type or detected or "image/png",
    )


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_uri(value: str) -> Tuple[bytes, Optional[str]]:
    """Split an uploaded ``data:<mime>;base64,<payload>`` string into bytes and MIME type."""

    text = (value or "").strip()
    if not text.startswith("data:") or ";base64," not in text:
        raise ValidationError("image must be a base64 data URI")
    header, encoded = text.split(",", 1)
    mime_type = header[len("data:"): header.index(";")] or None
    try:
        return base64.b64decode(encoded, validate=False), mime_type
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"invalid base64 content: {exc}") from exc
