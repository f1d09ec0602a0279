from app.config import DEFAULT_EMAIL_SENDER, _parse_allowed_origins, get_settings


def test_parse_allowed_origins_with_paths() -> None:
    raw = "https://example.com/app, https://demo.com/sub"
    assert _parse_allowed_origins(raw) == [
        "https://example.com",
        "https://demo.com",
    ]


def test_parse_allowed_origins_with_wildcard() -> None:
    assert _parse_allowed_origins("*") == ["*"]


def test_parse_allowed_origins_deduplicates_and_handles_empty() -> None:
    raw = " https://example.com/ , https://example.com ,"
    assert _parse_allowed_origins(raw) == ["https://example.com"]


def test_parse_allowed_origins_adds_scheme_to_bare_host() -> None:
    assert _parse_allowed_origins("localhost:5173") == ["http://localhost:5173"]


def test_parse_allowed_origins_defaults_to_wildcard() -> None:
    assert _parse_allowed_origins("") == ["*"]


def test_settings_read_service_credentials(monkeypatch) -> None:
    monkeypatch.setenv("SEEDREAM_API_KEY", "ark-key")
    monkeypatch.setenv("SEEDREAM_ENDPOINT_ID", "ep-2025")
    monkeypatch.setenv("RESEND_API_KEY", "re_123")
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.delenv("EMAIL_SENDER", raising=False)
    monkeypatch.delenv("IMAGE_BACKEND", raising=False)
    monkeypatch.setenv("SEEDREAM_PROXY", "http://proxy.internal:3128")

    settings = get_settings()

    assert settings.image_backend == "seedream"
    assert settings.seedream.is_configured
    assert settings.seedream.model == "ep-2025"
    assert settings.seedream.proxy == "http://proxy.internal:3128"
    assert settings.resend.api_key == "re_123"
    assert settings.resend.sender == DEFAULT_EMAIL_SENDER
    assert settings.supabase.is_configured
    assert settings.supabase.table == "cards"


def test_settings_blank_values_count_as_missing(monkeypatch) -> None:
    monkeypatch.setenv("SEEDREAM_API_KEY", "   ")
    monkeypatch.delenv("ARK_API_KEY", raising=False)
    monkeypatch.delenv("SEEDREAM_ENDPOINT_ID", raising=False)
    monkeypatch.delenv("SEEDREAM_MODEL", raising=False)
    monkeypatch.setenv("MAX_BODY_BYTES", "not-a-number")

    settings = get_settings()

    assert settings.seedream.api_key is None
    assert not settings.seedream.is_configured
    assert settings.max_body_bytes == 10 * 1024 * 1024
