"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any


def build_log_context(
    *,
    user_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
    appointment_id: str | None = None,
    case_id: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (identifiers only, never contact data)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    if appointment_id:
        context["appointment_id"] = appointment_id
    if case_id:
        context["case_id"] = case_id
    return context


def configure_logging(level: str) -> None:
    """Configure root logging once at application start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
