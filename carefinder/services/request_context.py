"""Per-request correlation state (request ID, client IP) via contextvars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
client_ip_var: ContextVar[str] = ContextVar("client_ip", default="unknown")


def generate_request_id() -> str:
    """Return a new 32-character hex request ID."""
    return uuid.uuid4().hex


def get_request_id() -> str:
    return request_id_var.get()


def get_client_ip() -> str:
    return client_ip_var.get()


def resolve_client_ip(headers: list[tuple[bytes, bytes]], peer: str | None) -> str:
    """Pick the caller's IP from proxy headers, falling back to the socket peer.

    ``X-Forwarded-For`` wins (first hop only), then ``X-Real-IP``.
    """
    forwarded = ""
    real_ip = ""
    for name, value in headers:
        if name == b"x-forwarded-for" and not forwarded:
            forwarded = value.decode("latin-1")
        elif name == b"x-real-ip" and not real_ip:
            real_ip = value.decode("latin-1")

    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if real_ip.strip():
        return real_ip.strip()
    return peer or "unknown"
