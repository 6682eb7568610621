from __future__ import annotations

import json
from contextvars import ContextVar
from typing import Any, Iterable

from emaildigest.core.config import SERVICE_NAME
from emaildigest.core.utils import utc_timestamp

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_endpoint_var: ContextVar[str | None] = ContextVar("endpoint", default=None)
_client_var: ContextVar[str | None] = ContextVar("client", default=None)
_algorithm_var: ContextVar[str | None] = ContextVar("algorithm", default=None)


def set_request_context(
    *,
    request_id: str,
    endpoint: str | None = None,
    client: str | None = None,
) -> None:
    _request_id_var.set(request_id)
    if endpoint is not None:
        _endpoint_var.set(endpoint)
    if client is not None:
        _client_var.set(client)


def update_request_context(
    *,
    endpoint: str | None = None,
    client: str | None = None,
    algorithm: str | None = None,
) -> None:
    if endpoint is not None:
        _endpoint_var.set(endpoint)
    if client is not None:
        _client_var.set(client)
    if algorithm is not None:
        _algorithm_var.set(algorithm)


def log_stdout(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=True))


def log_request_summary(
    *,
    request_id: str,
    endpoint: str,
    client: str | None,
    algorithm: str | None,
    status: str,
    error_codes: Iterable[str],
    email_count: int,
    duration_ms: int,
    log_type: str = "audit",
    level: str = "INFO",
) -> None:
    log_stdout(
        {
            "timestamp": utc_timestamp(),
            "level": level,
            "service": SERVICE_NAME,
            "log_type": log_type,
            "request_id": request_id,
            "endpoint": endpoint,
            "client": client,
            "algorithm": algorithm,
            "status": status,
            "error_codes": list(error_codes),
            "email_count": email_count,
            "duration_ms": duration_ms,
        }
    )


def log_event(
    *,
    event: str,
    log_type: str,
    level: str,
    algorithm: str | None = None,
    error_codes: Iterable[str] = (),
    details: dict[str, Any] | None = None,
    endpoint: str | None = None,
) -> None:
    log_stdout(
        {
            "timestamp": utc_timestamp(),
            "level": level,
            "service": SERVICE_NAME,
            "log_type": log_type,
            "event": event,
            "request_id": _request_id_var.get(),
            "endpoint": endpoint or _endpoint_var.get(),
            "client": _client_var.get(),
            "algorithm": algorithm or _algorithm_var.get(),
            "error_codes": list(error_codes),
            "details": details or {},
        }
    )
