from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image

from app.config import (
    GeminiConfig,
    ResendConfig,
    SeedreamConfig,
    Settings,
    SupabaseConfig,
    get_settings,
)


def make_png(width: int = 32, height: int = 32, color: tuple[int, int, int] = (200, 80, 60)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_data_url(width: int = 32, height: int = 32) -> str:
    encoded = base64.b64encode(make_png(width, height)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


@pytest.fixture
def settings_factory():
    def _make(**overrides) -> Settings:
        values = {
            "environment": "test",
            "allowed_origins": ["*"],
            "image_backend": "seedream",
            "max_body_bytes": 10 * 1024 * 1024,
            "seedream": SeedreamConfig(api_key="ark-test", model="ep-test"),
            "gemini": GeminiConfig(api_key="gm-test"),
            "resend": ResendConfig(api_key="re_test"),
            "supabase": SupabaseConfig(),
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def data_url_factory():
    return make_data_url
