from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import resend
from loguru import logger
from pydantic import ValidationError as SchemaError
from resend.exceptions import ResendError

from app.config import Settings, get_settings
from app.errors import ConfigurationError, ProviderError, ValidationError
from app.schemas import SendEmailRequest
from app.services.card_template import RenderedEmail, render_card_email
from app.templates.emails import load_base_template

SUBJECT_TEMPLATE = "A Vintage Greeting Card from {sender}"


def parse_email_request(payload: Any) -> SendEmailRequest:
    """Validate the request body; every one of the five fields is required."""

    if isinstance(payload, SendEmailRequest):
        request = payload
    elif isinstance(payload, Mapping):
        try:
            request = SendEmailRequest.model_validate(dict(payload))
        except SchemaError as exc:
            raise ValidationError(f"Invalid request body: {exc.error_count()} invalid field(s)") from exc
    else:
        raise ValidationError("Request body must be a JSON object")

    missing = request.missing_fields()
    if missing:
        raise ValidationError("Missing required fields", missing)
    return request


def build_email_params(request: SendEmailRequest, rendered: RenderedEmail, sender: str) -> Dict[str, Any]:
    return {
        "from": sender,
        "to": [request.to_email],
        "subject": SUBJECT_TEMPLATE.format(sender=request.from_name),
        "html": rendered.html,
        "attachments": [
            {
                "filename": item.filename,
                # the SDK serialises attachment content as a list of byte values
                "content": list(item.content),
                "content_id": item.content_id,
            }
            for item in rendered.attachments
        ],
    }


def dispatch_card_email(
    payload: Any,
    *,
    settings: Optional[Settings] = None,
    base_html: Optional[str] = None,
) -> Dict[str, Any]:
    """Render the card email and hand it to Resend in a single attempt.

    Raises ``ValidationError`` for a missing field, ``ConfigurationError`` when
    no API key is set (both before any network I/O) and ``ProviderError`` when
    Resend rejects the message.
    """

    request = parse_email_request(payload)

    settings = settings or get_settings()
    if not settings.resend.is_configured:
        raise ConfigurationError("Missing RESEND_API_KEY")

    rendered = render_card_email(
        base_html if base_html is not None else load_base_template(),
        recipient_name=request.to_name,
        sender_name=request.from_name,
        message=request.message,
        image_src=request.image,
    )
    params = build_email_params(request, rendered, settings.resend.sender)

    resend.api_key = settings.resend.api_key
    try:
        result = resend.Emails.send(params)
    except ResendError as exc:
        logger.error("Resend API Error: {}", exc)
        raise ProviderError(getattr(exc, "message", None) or str(exc)) from exc

    logger.info(
        "card email sent to={} attachments={}",
        request.to_email,
        len(rendered.attachments),
    )
    return dict(result) if isinstance(result, Mapping) else {"data": result}


def status_for(exc: Exception) -> int:
    """HTTP status for the email endpoint: 400 for bad input, 500 for everything else."""

    return 400 if isinstance(exc, ValidationError) else 500


__all__ = ["build_email_params", "dispatch_card_email", "parse_email_request", "status_for"]
