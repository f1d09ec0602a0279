"""Domain records shared by the card service."""

from .card import CARD_STYLE, GeneratedCard  # noqa: F401

__all__ = ["CARD_STYLE", "GeneratedCard"]
