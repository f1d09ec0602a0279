from __future__ import annotations

from typing import Awaitable, Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}


def apply_cors_headers(response: Response) -> Response:
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Attach ``CORS_HEADERS`` to every response on ``paths``, whether or not the request sent an Origin."""

    def __init__(self, app, *, paths: Iterable[str]) -> None:  # type: ignore[override]
        self.paths = frozenset(paths)
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        if request.url.path in self.paths:
            apply_cors_headers(response)
        return response


__all__ = ["CORS_HEADERS", "PermissiveCORSMiddleware", "apply_cors_headers"]
