"""Persist generated cards to the hosted Supabase table."""
from __future__ import annotations

from typing import Any, Dict, List, Protocol

from loguru import logger
from supabase import create_client

from app.config import SupabaseConfig
from app.errors import PersistenceError
from app.models.card import GeneratedCard


class CardStore(Protocol):
    available: bool

    def insert(self, card: GeneratedCard) -> List[Dict[str, Any]]:
        ...


class SupabaseCardStore:
    """Insert one row per card through the supabase client."""

    available = True

    def __init__(self, client: Any, table: str = "cards") -> None:
        self.client = client
        self.table = table

    def insert(self, card: GeneratedCard) -> List[Dict[str, Any]]:
        row = card.to_row()
        try:
            response = self.client.table(self.table).insert([row]).execute()
        except Exception as exc:  # postgrest raises APIError, transport errors vary
            logger.warning("card insert failed table={} err={}", self.table, exc)
            raise PersistenceError(f"Saving failed: {_message(exc)}") from exc

        data = getattr(response, "data", None) or []
        logger.info("card saved table={} rows={}", self.table, len(data))
        return data


class UnavailableCardStore:
    """Stand-in used when the store is not configured; every insert fails."""

    available = False

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def insert(self, card: GeneratedCard) -> List[Dict[str, Any]]:
        raise PersistenceError(self.reason)


def build_card_store(config: SupabaseConfig) -> CardStore:
    """Create the store once at start-up; never raises."""

    if not config.is_configured:
        logger.warning("Missing Supabase environment variables; cards will not be saved.")
        return UnavailableCardStore("Card storage is not configured")

    try:
        client = create_client(config.url, config.key)
    except Exception as exc:  # invalid URL or key format
        logger.error("Failed to initialize Supabase client: {}", exc)
        return UnavailableCardStore(f"Card storage unavailable: {exc}")

    return SupabaseCardStore(client, table=config.table)


def _message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    return str(message) if message else str(exc)


__all__ = [
    "CardStore",
    "SupabaseCardStore",
    "UnavailableCardStore",
    "build_card_store",
]
