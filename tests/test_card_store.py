from types import SimpleNamespace

import pytest

from app.config import SupabaseConfig
from app.errors import PersistenceError
from app.models.card import GeneratedCard
from app.services import card_store
from app.services.card_store import SupabaseCardStore, UnavailableCardStore, build_card_store

CARD = GeneratedCard(
    original_image=b"raw",
    result_image_url="https://cdn.example.com/card.png",
    sender_name="Bob",
    recipient_name="",
    message=None,
)


class FakeTable:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def insert(self, rows):
        self.client.inserted.append((self.name, rows))
        return self

    def execute(self):
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.inserted[-1][1])


class FakeSupabase:
    def __init__(self, error=None):
        self.error = error
        self.inserted = []

    def table(self, name):
        return FakeTable(self, name)


def test_card_row_maps_blank_fields_to_null():
    assert CARD.to_row() == {
        "sender_name": "Bob",
        "recipient_name": None,
        "message": None,
        "image_url": "https://cdn.example.com/card.png",
        "style": "1920s",
    }


def test_supabase_store_inserts_one_row():
    client = FakeSupabase()
    store = SupabaseCardStore(client, table="cards")

    data = store.insert(CARD)

    assert client.inserted == [("cards", [CARD.to_row()])]
    assert data == [CARD.to_row()]


def test_supabase_store_wraps_failures():
    error = Exception("permission denied for table cards")
    error.message = "permission denied for table cards"
    store = SupabaseCardStore(FakeSupabase(error=error))

    with pytest.raises(PersistenceError, match="Saving failed: permission denied"):
        store.insert(CARD)


def test_unavailable_store_always_fails():
    store = UnavailableCardStore("Card storage is not configured")

    assert store.available is False
    with pytest.raises(PersistenceError, match="not configured"):
        store.insert(CARD)


def test_build_card_store_without_config_is_unavailable():
    store = build_card_store(SupabaseConfig())

    assert isinstance(store, UnavailableCardStore)


def test_build_card_store_with_config(monkeypatch):
    created = {}

    def fake_create_client(url, key):
        created["args"] = (url, key)
        return FakeSupabase()

    monkeypatch.setattr(card_store, "create_client", fake_create_client)

    store = build_card_store(SupabaseConfig(url="https://demo.supabase.co", key="anon", table="history"))

    assert isinstance(store, SupabaseCardStore)
    assert store.table == "history"
    assert created["args"] == ("https://demo.supabase.co", "anon")


def test_build_card_store_client_error_is_unavailable(monkeypatch):
    def broken_create_client(url, key):
        raise ValueError("Invalid API key")

    monkeypatch.setattr(card_store, "create_client", broken_create_client)

    store = build_card_store(SupabaseConfig(url="https://demo.supabase.co", key="bad"))

    assert isinstance(store, UnavailableCardStore)
    assert "Invalid API key" in store.reason
