from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger("vintage-card")

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024  # base64 photos are large


class BodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject JSON bodies above ``max_body_bytes`` with a 413."""

    WATCH_PATH_PREFIXES = ("/api/",)

    def __init__(self, app, *, max_body_bytes: int | None = None, **_: Any) -> None:  # type: ignore[override]
        limit = DEFAULT_MAX_BODY_BYTES if max_body_bytes is None else max_body_bytes
        self.max_body_bytes = limit if limit > 0 else None
        super().__init__(app)

    def _too_large(self, content_length: int | None, body_len: int) -> bool:
        if self.max_body_bytes is None:
            return False
        if content_length and content_length > self.max_body_bytes:
            return True
        return body_len > self.max_body_bytes

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method not in {"POST", "PUT", "PATCH"}:
            return await call_next(request)

        path = request.url.path
        if not any(path.startswith(prefix) for prefix in self.WATCH_PATH_PREFIXES):
            return await call_next(request)

        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        start = time.time()

        content_length_header = request.headers.get("content-length")
        try:
            content_length = int(content_length_header) if content_length_header else None
        except (TypeError, ValueError):
            content_length = None

        if content_length is not None and self._too_large(content_length, 0):
            return self._reject(rid, path, content_length)

        body = await request.body()
        if self._too_large(content_length, len(body)):
            return self._reject(rid, path, len(body))

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        response = await call_next(Request(request.scope, receive))
        logger.debug(
            "[body-limit] rid=%s path=%s size=%s status=%s dur_ms=%s",
            rid,
            path,
            len(body),
            response.status_code,
            int((time.time() - start) * 1000),
        )
        return response

    def _reject(self, rid: str, path: str, size: int) -> JSONResponse:
        logger.info("[body-limit] rid=%s path=%s rejected size=%s", rid, path, size)
        return JSONResponse(
            status_code=413,
            content={"error": f"Request body too large ({size} bytes, limit {self.max_body_bytes})"},
        )


__all__ = ["BodyLimitMiddleware"]
