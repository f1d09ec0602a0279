from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List
from urllib.parse import urlparse

DEFAULT_SEEDREAM_API_URL = "https://ark.cn-beijing.volces.com/api/v3/images/generations"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-image"
DEFAULT_EMAIL_SENDER = "Happy New Year <gift@terrypmw.com>"
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


def _env(*names: str) -> str | None:
    """Return the first non-blank environment value among *names*."""

    for name in names:
        value = os.getenv(name)
        if value is None:
            continue
        text = value.strip()
        if text:
            return text
    return None


def _as_int(value: str | None, default: int) -> int:
    try:
        return max(int(value), 0) if value is not None else default
    except (TypeError, ValueError):
        return default


def _normalise_origin(value: str) -> str | None:
    """
    Normalise a single origin:
    - "*" is kept as is
    - bare hosts (localhost:5173) get an http:// scheme
    - paths are dropped, only scheme://host[:port] remains
    - invalid values return None
    """
    v = value.strip()
    if not v:
        return None
    if v == "*":
        return "*"
    if "://" not in v:
        v = "http://" + v
    p = urlparse(v)
    if not (p.scheme and p.netloc):
        return None
    return f"{p.scheme}://{p.netloc}"


def _parse_allowed_origins(raw: str | None) -> List[str]:
    """Parse ALLOWED_ORIGINS into a list that is never empty.

    Accepts "*", comma separated values, removes duplicates, adds a missing
    scheme and strips paths.
    """
    if not raw:
        return ["*"]

    cleaned: List[str] = []
    for token in raw.split(","):
        origin = _normalise_origin(token)
        if origin == "*":
            return ["*"]
        if origin and origin not in cleaned:
            cleaned.append(origin)

    return cleaned or ["*"]


@dataclass
class SeedreamConfig:
    api_key: str | None = None
    model: str | None = None
    api_url: str = DEFAULT_SEEDREAM_API_URL
    proxy: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)

    @classmethod
    def from_env(cls) -> "SeedreamConfig":
        return cls(
            api_key=_env("SEEDREAM_API_KEY", "ARK_API_KEY"),
            # Volcengine addresses models through an endpoint id (ep-...)
            model=_env("SEEDREAM_ENDPOINT_ID", "SEEDREAM_MODEL"),
            api_url=_env("SEEDREAM_API_URL") or DEFAULT_SEEDREAM_API_URL,
            proxy=_env("SEEDREAM_PROXY"),
        )


@dataclass
class GeminiConfig:
    api_key: str | None = None
    model: str = DEFAULT_GEMINI_MODEL

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        return cls(
            api_key=_env("GEMINI_API_KEY", "GOOGLE_API_KEY"),
            model=_env("GEMINI_IMAGE_MODEL") or DEFAULT_GEMINI_MODEL,
        )


@dataclass
class ResendConfig:
    api_key: str | None = None
    sender: str = DEFAULT_EMAIL_SENDER

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class SupabaseConfig:
    url: str | None = None
    key: str | None = None
    table: str = "cards"

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


@dataclass
class Settings:
    environment: str
    allowed_origins: List[str]
    image_backend: str
    max_body_bytes: int
    seedream: SeedreamConfig
    gemini: GeminiConfig
    resend: ResendConfig
    supabase: SupabaseConfig


@lru_cache()
def get_settings() -> Settings:
    backend = (_env("IMAGE_BACKEND") or "seedream").lower()

    resend_cfg = ResendConfig(
        api_key=_env("RESEND_API_KEY"),
        sender=_env("EMAIL_SENDER") or DEFAULT_EMAIL_SENDER,
    )

    supabase_cfg = SupabaseConfig(
        url=_env("SUPABASE_URL"),
        key=_env("SUPABASE_ANON_KEY", "SUPABASE_KEY"),
        table=_env("SUPABASE_TABLE") or "cards",
    )

    return Settings(
        environment=_env("ENVIRONMENT") or "development",
        allowed_origins=_parse_allowed_origins(_env("ALLOWED_ORIGINS")),
        image_backend=backend,
        max_body_bytes=_as_int(_env("MAX_BODY_BYTES"), DEFAULT_MAX_BODY_BYTES),
        seedream=SeedreamConfig.from_env(),
        gemini=GeminiConfig.from_env(),
        resend=resend_cfg,
        supabase=supabase_cfg,
    )
