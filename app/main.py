from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from app.config import get_settings
from app.errors import CardServiceError, ValidationError
from app.middlewares.body_limit import BodyLimitMiddleware
from app.middlewares.cors import PermissiveCORSMiddleware
from app.schemas import GenerateCardRequest, GenerateCardResponse
from app.services.card_store import CardStore, build_card_store
from app.services.card_workflow import CardWorkflow
from app.services.email_sender import dispatch_card_email, status_for
from app.services.image_provider import CardGenerator, build_generator, decode_data_uri

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# align uvicorn with the service log level
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("uvicorn").setLevel(LOG_LEVEL)
logging.getLogger("uvicorn.error").setLevel(LOG_LEVEL)
logging.getLogger("uvicorn.access").setLevel(LOG_LEVEL)
logging.getLogger("vintage-card").setLevel(LOG_LEVEL)

logger = logging.getLogger("vintage-card")
app = FastAPI(title="Vintage Card API", version="1.0.0")

settings = get_settings()

if not settings.resend.is_configured:
    logger.warning("RESEND_API_KEY is missing; /api/send-email will answer 500.")


@lru_cache(maxsize=1)
def get_card_store() -> CardStore:
    """Created once per process and injected into the handlers that persist cards."""

    return build_card_store(get_settings().supabase)


def get_generator() -> CardGenerator:
    return build_generator(get_settings())


app.add_middleware(BodyLimitMiddleware, max_body_bytes=settings.max_body_bytes)
logger.info("BodyLimitMiddleware ready max_body_bytes=%s", settings.max_body_bytes)

# the email endpoint answers every caller with the same permissive headers as the hosted function
app.add_middleware(PermissiveCORSMiddleware, paths=["/api/send-email"])

cors_allow_origins = settings.allowed_origins or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_credentials="*" not in cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(CardServiceError)
def card_service_error_handler(request: Request, exc: CardServiceError) -> JSONResponse:
    logger.error("Request to %s failed: %s", request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        message = "Request body must be valid JSON"
    else:
        message = f"Invalid request body: {len(errors)} invalid field(s)"
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return _error(400, message)


@app.get("/", include_in_schema=False)
def root() -> dict[str, Any]:
    return {"service": "vintage-card", "ok": True}


@app.head("/", include_in_schema=False)
def root_head() -> Response:
    return Response(status_code=200)


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.options("/{path:path}", include_in_schema=False)
def cors_preflight(path: str) -> Response:
    # real browser preflights are answered by CORSMiddleware before this
    return Response(status_code=200)


@app.post("/api/generate-card", response_model=GenerateCardResponse)
def generate_card(
    payload: Any = Body(default=None),
    generator: CardGenerator = Depends(get_generator),
    store: CardStore = Depends(get_card_store),
) -> JSONResponse:
    try:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        try:
            request_data = GenerateCardRequest.model_validate(payload)
        except SchemaError as exc:
            raise ValidationError(f"Invalid request body: {exc.error_count()} invalid field(s)") from exc
        if not request_data.image:
            raise ValidationError("Missing required fields", ["image"])

        image_bytes, mime_type = decode_data_uri(request_data.image)

        workflow = CardWorkflow(generator, store)
        workflow.from_name = request_data.from_name or ""
        workflow.to_name = request_data.to_name or ""
        workflow.message = request_data.message or ""
        workflow.select_image(image_bytes, mime_type)

        logger.info(
            "[generate-card] bytes=%s mime=%s store_available=%s",
            len(image_bytes),
            mime_type,
            getattr(store, "available", None),
        )
        outcome = workflow.generate()
    except CardServiceError as exc:
        if exc.status_code >= 500:
            logger.error("Card generation failed: %s", exc.message)
        return _error(exc.status_code, exc.message)
    except Exception as exc:  # keep the worker alive on anything unexpected
        logger.exception("Unexpected card generation failure")
        return _error(500, str(exc))

    if outcome is None:  # pragma: no cover - a fresh workflow always has an image here
        return _error(400, "No image selected")

    body = GenerateCardResponse(
        image_url=outcome.image_url,
        saved=outcome.saved,
        warning=outcome.warning,
    )
    return JSONResponse(body.model_dump(by_alias=True, exclude_none=True))


@app.post("/api/send-email")
def send_card_email(payload: Any = Body(default=None)) -> JSONResponse:
    try:
        data = dispatch_card_email(payload)
    except CardServiceError as exc:
        return _error(status_for(exc), exc.message)
    except Exception as exc:  # keep the worker alive on anything unexpected
        logger.exception("Error sending email")
        return _error(500, str(exc))
    return JSONResponse(data)


__all__ = ["app", "get_card_store", "get_generator"]
