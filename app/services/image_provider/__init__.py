"""Image generation backends that turn a photo into a vintage poster card."""
from __future__ import annotations

from .base import CardGenerator, decode_data_uri, describe_image, to_data_uri
from .factory import build_generator
from .gemini_provider import GeminiGenerator
from .seedream_provider import SeedreamGenerator

__all__ = [
    "CardGenerator",
    "GeminiGenerator",
    "SeedreamGenerator",
    "build_generator",
    "decode_data_uri",
    "describe_image",
    "to_data_uri",
]
