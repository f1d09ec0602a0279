"""Load the static email templates shipped with the package."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

_TEMPLATES_DIR = Path(__file__).resolve().parent

CARD_EMAIL_TEMPLATE = "card_email.html"


@lru_cache(maxsize=4)
def load_base_template(name: str = CARD_EMAIL_TEMPLATE) -> str:
    """Return the raw HTML of a template asset by file name."""

    path = _TEMPLATES_DIR / name
    with path.open("r", encoding="utf-8") as handle:
        return handle.read()


__all__ = ["CARD_EMAIL_TEMPLATE", "load_base_template"]
