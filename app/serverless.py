"""ASGI entry point for hosting ``/api/send-email`` as a serverless function.

The route accepts every method itself so that the permissive CORS headers are
attached to all responses, including 405s and preflights.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from app.errors import CardServiceError, ValidationError
from app.middlewares.cors import CORS_HEADERS
from app.services.email_sender import dispatch_card_email, status_for

logger = logging.getLogger("vintage-card")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _json(status_code: int, content: Any) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=CORS_HEADERS)


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc


async def send_email_endpoint(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    if request.method != "POST":
        return _json(405, {"error": "Method Not Allowed"})

    try:
        payload = await _read_json(request)
        data = await run_in_threadpool(dispatch_card_email, payload)
    except CardServiceError as exc:
        return _json(status_for(exc), {"error": exc.message})
    except Exception as exc:  # a function invocation must always answer
        logger.exception("Handler Error")
        return _json(500, {"error": str(exc)})

    return _json(200, data)


routes = [Route("/api/send-email", send_email_endpoint, methods=ALL_METHODS)]

app = Starlette(routes=routes)

__all__ = ["app", "CORS_HEADERS", "send_email_endpoint"]
