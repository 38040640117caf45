"""ASGI middleware guarding every HTTP request: response hardening headers and an upload cap."""

import json

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

BASE_HEADERS: tuple[tuple[str, str], ...] = (
    ("x-content-type-options", "nosniff"),
    ("x-frame-options", "DENY"),
    ("x-xss-protection", "0"),
    ("referrer-policy", "strict-origin-when-cross-origin"),
    ("permissions-policy", "geolocation=(), microphone=(), camera=(), payment=()"),
)
HSTS = ("strict-transport-security", "max-age=63072000; includeSubDomains")
SERVER_NAME = "growth-catalyst"


class SecurityHeadersMiddleware:
    def __init__(self, app: ASGIApp, is_production: bool = False) -> None:
        self.app = app
        self.headers = BASE_HEADERS + ((HSTS,) if is_production else ())

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers:
                    headers.append(name, value)
                headers["server"] = SERVER_NAME
            await send(message)

        await self.app(scope, receive, send_with_headers)


def _declared_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None


class RequestBodySizeLimitMiddleware:
    """Answers 413 up front when the declared Content-Length is over ``max_bytes``.

    Chunked bodies without a Content-Length pass through untouched.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = 10_485_760) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            length = _declared_length(scope)
            if length is not None and length > self.max_bytes:
                logger.warning(
                    "request_body_too_large",
                    path=scope.get("path", ""),
                    content_length=length,
                    max_bytes=self.max_bytes,
                )
                await self._reject(send)
                return
        await self.app(scope, receive, send)

    async def _reject(self, send: Send) -> None:
        payload = json.dumps(
            {
                "error": "payload_too_large",
                "message": "Request body too large",
                "detail": {"max_bytes": self.max_bytes},
                "request_id": "unknown",
            }
        ).encode()
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(payload)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": payload})
