"""Request logging middleware (pure ASGI)."""

from __future__ import annotations

import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from carefinder.services.metrics import metrics
from carefinder.services.request_context import (
    client_ip_var,
    generate_request_id,
    request_id_var,
    resolve_client_ip,
)

logger = logging.getLogger("carefinder.access")


class RequestLoggingMiddleware:
    """Log ``method path status_code latency_ms`` for every request.

    Binds the request ID and client IP to context for the duration of the
    request, adds ``X-Request-ID`` and ``X-Response-Time-Ms`` response
    headers and feeds the request counters and latency samples.

    Query strings are not logged: search queries may describe a user's
    health conditions.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = scope.get("headers", [])
        incoming_id = ""
        for header_name, header_value in headers:
            if header_name == b"x-request-id":
                incoming_id = header_value.decode("latin-1")
                break

        rid = incoming_id or generate_request_id()
        peer = scope.get("client")
        client_ip = resolve_client_ip(headers, peer[0] if peer else None)
        rid_token = request_id_var.set(rid)
        ip_token = client_ip_var.set(client_ip)

        start = time.perf_counter()
        status_code = 500  # reported if the app never starts a response

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

                response_headers = list(message.get("headers", []))
                response_headers.append(
                    (b"x-response-time-ms", str(elapsed_ms).encode())
                )
                response_headers.append((b"x-request-id", rid.encode()))
                message = {**message, "headers": response_headers}

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "%s %s %s %.2fms",
                scope.get("method", ""),
                scope.get("path", ""),
                status_code,
                elapsed_ms,
            )
            metrics.inc_request(status_code)
            metrics.record_latency(elapsed_ms)
            client_ip_var.reset(ip_token)
            request_id_var.reset(rid_token)
