"""Security headers middleware.

Adds hardening headers and a request id to every HTTP response using the
pure ASGI pattern.
"""

from uuid import uuid4

from ..config import settings

REQUEST_ID_HEADER = b"x-request-id"

HSTS_VALUE = b"max-age=31536000; includeSubDomains"


def _incoming_request_id(scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name.lower() == REQUEST_ID_HEADER:
            return value.decode("latin-1")[:128] or None
    return None


class SecurityHeadersMiddleware:
    """
    Add security headers to all responses.

    Pure ASGI so streamed responses (the SSE endpoint) pass through without
    being buffered.

    Headers added:
        - X-Request-Id: Caller's id when supplied, otherwise a fresh UUID
        - X-Content-Type-Options: nosniff
        - X-Frame-Options: DENY
        - Strict-Transport-Security: outside debug mode, unless disabled
    """

    def __init__(self, app, hsts: bool | None = None):
        self.app = app
        self.hsts = (not settings.debug) if hsts is None else hsts

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or str(uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = [
                    (name, value)
                    for name, value in message.get("headers", [])
                    if name.lower() != REQUEST_ID_HEADER
                ]
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                headers.append((b"x-content-type-options", b"nosniff"))
                headers.append((b"x-frame-options", b"DENY"))
                if self.hsts:
                    headers.append((b"strict-transport-security", HSTS_VALUE))

                message = {**message, "headers": headers}
            await send(message)

        await self.app(scope, receive, send_with_headers)
