"""Pick the configured image generation backend."""
from __future__ import annotations

from app.config import Settings
from app.errors import ConfigurationError

from .base import CardGenerator
from .gemini_provider import GeminiGenerator
from .seedream_provider import SeedreamGenerator


def build_generator(settings: Settings) -> CardGenerator:
    """Return the generator named by ``IMAGE_BACKEND`` (seedream by default)."""

    backend = (settings.image_backend or "seedream").lower()
    if backend == "seedream":
        return SeedreamGenerator(settings.seedream)
    if backend == "gemini":
        return GeminiGenerator(settings.gemini)
    raise ConfigurationError(f"Unknown IMAGE_BACKEND={backend}")
