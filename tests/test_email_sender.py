import pytest

from app.errors import ConfigurationError, ProviderError, ValidationError
from app.services import email_sender
from app.services.email_sender import dispatch_card_email, parse_email_request, status_for

BASE = (
    "<p>Dear [Recipient Name]</p>"
    "<!-- IMAGE_START --><i>img</i><!-- IMAGE_END -->"
    "<!-- MESSAGE_START --><i>msg</i><!-- MESSAGE_END -->"
    "<p>[Sender Name]</p>"
)

PAYLOAD = {
    "toEmail": "a@b.com",
    "toName": "Alice",
    "fromName": "Bob",
    "message": "Hi\nThere",
    "image": "data:image/png;base64,AAAA",
}


class FakeResendError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


@pytest.fixture
def sent(monkeypatch):
    calls = []

    def fake_send(params):
        calls.append(params)
        return {"id": "email_123"}

    monkeypatch.setattr(email_sender.resend.Emails, "send", fake_send)
    return calls


def test_dispatch_sends_rendered_card(sent, settings_factory):
    result = dispatch_card_email(PAYLOAD, settings=settings_factory(), base_html=BASE)

    assert result == {"id": "email_123"}
    assert len(sent) == 1
    params = sent[0]
    assert params["from"] == "Happy New Year <gift@terrypmw.com>"
    assert params["to"] == ["a@b.com"]
    assert params["subject"] == "A Vintage Greeting Card from Bob"
    assert "Dear Alice" in params["html"]
    assert "Hi<br/>There" in params["html"]
    assert "cid:card-image" in params["html"]
    assert params["attachments"] == [
        {"filename": "card.png", "content": [0, 0, 0], "content_id": "card-image"}
    ]


def test_dispatch_with_remote_image_has_no_attachments(sent, settings_factory):
    payload = dict(PAYLOAD, image="https://cdn.example.com/card.png")

    dispatch_card_email(payload, settings=settings_factory(), base_html=BASE)

    assert sent[0]["attachments"] == []
    assert 'src="https://cdn.example.com/card.png"' in sent[0]["html"]


def test_dispatch_uses_packaged_template_by_default(sent, settings_factory):
    dispatch_card_email(PAYLOAD, settings=settings_factory())

    html = sent[0]["html"]
    assert "IMAGE_START" not in html
    assert "Alice" in html


@pytest.mark.parametrize("field", ["toEmail", "toName", "fromName", "message", "image"])
def test_missing_field_is_rejected_without_provider_call(field, sent, settings_factory):
    payload = dict(PAYLOAD)
    payload.pop(field)

    with pytest.raises(ValidationError) as excinfo:
        dispatch_card_email(payload, settings=settings_factory(), base_html=BASE)

    assert excinfo.value.message == "Missing required fields"
    assert excinfo.value.missing == [field]
    assert sent == []


def test_empty_string_counts_as_missing():
    with pytest.raises(ValidationError):
        parse_email_request(dict(PAYLOAD, message=""))


def test_non_object_body_is_rejected():
    with pytest.raises(ValidationError):
        parse_email_request(["not", "an", "object"])


def test_missing_api_key_is_a_configuration_error(sent, settings_factory):
    from app.config import ResendConfig

    with pytest.raises(ConfigurationError, match="Missing RESEND_API_KEY"):
        dispatch_card_email(PAYLOAD, settings=settings_factory(resend=ResendConfig()), base_html=BASE)

    assert sent == []


def test_provider_failure_carries_upstream_message(monkeypatch, settings_factory):
    def failing_send(params):
        raise FakeResendError("The `to` field is invalid")

    monkeypatch.setattr(email_sender, "ResendError", FakeResendError)
    monkeypatch.setattr(email_sender.resend.Emails, "send", failing_send)

    with pytest.raises(ProviderError) as excinfo:
        dispatch_card_email(PAYLOAD, settings=settings_factory(), base_html=BASE)

    assert excinfo.value.message == "The `to` field is invalid"


def test_status_for_maps_client_and_server_errors():
    assert status_for(ValidationError("x")) == 400
    assert status_for(ConfigurationError("x")) == 500
    assert status_for(ProviderError("x")) == 500
    assert status_for(RuntimeError("x")) == 500
