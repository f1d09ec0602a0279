from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from app.config import GeminiConfig
from app.errors import ConfigurationError, ProviderError

from .base import describe_image

log = logging.getLogger("vintage-card")

GEMINI_STYLE_PROMPT = """
You are an expert AI artist specializing in 1930s vintage oil-painted poster styles.
Transform the provided input image into a stunning 1930s vintage travel poster.

Style Guidelines:
- **Technique**: Digital oil painting with visible brushstrokes and canvas texture.
- **Era**: 1930s Art Deco and vintage travel poster aesthetic.
- **Colors**: Use a limited, harmonious palette with warm earth tones (ochre, sepia, terracotta), deep reds, muted blues/teals, and cream/off-white backgrounds. Avoid neon or overly digital-looking colors.
- **Lighting**: High contrast with dramatic shadows and warm highlights.
- **Details**: Simplify complex details into bold shapes and planes of color. Remove visual noise.
- **Composition**: Dynamic but balanced.
- **Output**: The result should look like a scanned high-quality vintage poster found in an archive.

Do not add any new text unless it is artistically necessary or replaces existing text in a vintage style.
"""


class GeminiGenerator:
    """google-genai SDK based image-to-image generator."""

    def __init__(
        self,
        config: GeminiConfig,
        *,
        prompt: str = GEMINI_STYLE_PROMPT,
        client: Any = None,
    ) -> None:
        self.config = config
        self.prompt = prompt
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise ConfigurationError("Gemini API key is missing. Please configure GEMINI_API_KEY.")
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    def generate(self, image_bytes: bytes, *, mime_type: Optional[str] = None) -> str:
        client = self.client
        info = describe_image(image_bytes, mime_type)

        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=self.prompt),
                    types.Part.from_bytes(data=image_bytes, mime_type=info.mime_type),
                ],
            )
        ]

        try:
            response = client.models.generate_content(model=self.config.model, contents=contents)
        except Exception as exc:  # SDK raises its own APIError hierarchy
            log.exception("[gemini.generate] request failed")
            raise ProviderError(f"Gemini request failed: {exc}") from exc

        candidates = getattr(response, "candidates", None) or []
        content = getattr(candidates[0], "content", None) if candidates else None
        parts = getattr(content, "parts", None) or []
        if not parts:
            raise ProviderError("No content generated.")

        for part in parts:
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                data = inline.data
                if isinstance(data, (bytes, bytearray)):
                    data = base64.b64encode(bytes(data)).decode("ascii")
                mime = getattr(inline, "mime_type", None) or "image/png"
                return f"data:{mime};base64,{data}"

        for part in parts:
            text = getattr(part, "text", None)
            if text:
                log.warning("[gemini.generate] model returned text instead of image: %s", text)
                raise ProviderError(f"Model returned text: {text}")

        raise ProviderError("No image generated.")
