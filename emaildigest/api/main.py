from __future__ import annotations

import time
from typing import List, Optional
from uuid import uuid4

from fastapi import FastAPI, File, Form, Header, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from emaildigest.audit.logger import append_audit_record, ensure_audit_log_ready, read_audit_logs
from emaildigest.batch.export import export_filename, render_csv
from emaildigest.batch.parsing import extract_emails_from_file, is_supported_upload, is_valid_email, parse_email_lines
from emaildigest.batch.processor import hash_emails
from emaildigest.core import config
from emaildigest.core.exceptions import ApiError, AuditUnavailableError, InternalError, MalformedInputError
from emaildigest.core.logging import log_event, log_request_summary, set_request_context, update_request_context
from emaildigest.core.models import (
    AlgorithmInfo,
    AuditRecord,
    BatchDigestRequest,
    BatchOutcome,
    BatchResult,
    DigestRequest,
    DigestResult,
    ErrorResult,
    Reason,
)
from emaildigest.core.security import verify_bearer_token
from emaildigest.core.utils import utc_timestamp
from emaildigest.digest.algorithms import ALGORITHM_NAMES, DIGEST_SIZES, HashAlgorithm, list_algorithms, resolve_algorithm
from emaildigest.digest.dispatcher import digest, trim_text


app = FastAPI(title="Email Digest Service", version="1.0.0")

REQUEST_COUNT = Counter(
    "email_digest_requests_total",
    "Total digest requests",
    ["endpoint", "algorithm", "status"],
)
EMAILS_DIGESTED = Counter(
    "email_digest_emails_total",
    "Email addresses digested",
    ["algorithm"],
)
REQUEST_LATENCY = Histogram(
    "email_digest_request_duration_seconds",
    "Request latency in seconds",
    ["endpoint"],
)


@app.middleware("http")
async def request_summary_logger(request: Request, call_next):
    request_id = str(uuid4())
    request.state.request_id = request_id
    set_request_context(
        request_id=request_id,
        endpoint=str(request.url.path),
        client=request.headers.get("user-agent"),
    )
    start = time.time()
    response = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)
    REQUEST_LATENCY.labels(endpoint=str(request.url.path)).observe(duration_ms / 1000.0)
    status = getattr(request.state, "status", None)
    if status:
        algorithm = getattr(request.state, "algorithm", None)
        REQUEST_COUNT.labels(
            endpoint=str(request.url.path),
            algorithm=algorithm or "unknown",
            status=status,
        ).inc()
        log_request_summary(
            request_id=request_id,
            endpoint=str(request.url.path),
            client=request.headers.get("user-agent"),
            algorithm=algorithm,
            status=status,
            error_codes=getattr(request.state, "error_codes", []),
            email_count=getattr(request.state, "email_count", 0),
            duration_ms=duration_ms,
            level="WARN" if status == "ERROR" else "INFO",
        )
    return response


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@app.get("/readyz")
async def readyz() -> dict:
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    result = _build_error(request, [Reason(code=exc.code, message=exc.message)])
    if exc.code in {"UNSUPPORTED_ALGORITHM", "PRIMITIVE_FAILURE"}:
        log_event(
            event="digest_failed",
            log_type="digest",
            level="WARN" if exc.http_status < 500 else "ERROR",
            algorithm=getattr(request.state, "algorithm", None),
            error_codes=[exc.code],
        )
    _record_error(request, result)
    return JSONResponse(status_code=exc.http_status, content=result.model_dump())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
    return await handle_api_error(
        request,
        MalformedInputError(f"Request failed validation: {', '.join(fields)}", "SCHEMA_INVALID"),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    error = InternalError()
    result = _build_error(request, [Reason(code=error.code, message=error.message)])
    _record_error(request, result)
    return JSONResponse(status_code=error.http_status, content=result.model_dump())


@app.get("/api/v1/algorithms")
async def get_algorithms() -> List[AlgorithmInfo]:
    return [
        AlgorithmInfo(id=algorithm.value, name=ALGORITHM_NAMES[algorithm], digest_size=DIGEST_SIZES[algorithm])
        for algorithm in list_algorithms()
    ]


@app.post("/api/v1/digest")
async def digest_endpoint(
    request: Request,
    payload: DigestRequest,
    authorization: str | None = Header(default=None),
) -> DigestResult:
    _require_audit_ready()
    verify_bearer_token(authorization)
    algorithm = _resolve(request, payload.algorithm)
    email = trim_text(payload.email)
    if not email:
        raise MalformedInputError("Please enter an email address", "EMPTY_INPUT")
    if not is_valid_email(email):
        raise MalformedInputError("Please enter a valid email address", "INVALID_EMAIL")
    result = DigestResult(
        request_id=request.state.request_id,
        algorithm=algorithm.value,
        algorithm_name=ALGORITHM_NAMES[algorithm],
        email=email.lower(),
        hash=digest(email, algorithm),
        timestamp=utc_timestamp(),
    )
    _record_success(request, algorithm, email_count=1)
    return result


@app.post("/api/v1/digest/batch")
async def digest_batch_endpoint(
    request: Request,
    payload: BatchDigestRequest,
    authorization: str | None = Header(default=None),
) -> BatchResult:
    outcome = await _hash_textarea(request, payload, authorization)
    return _batch_result(request, outcome)


@app.post("/api/v1/digest/file")
async def digest_file_endpoint(
    request: Request,
    file: UploadFile = File(...),
    algorithm: str = Form("md5"),
    authorization: str | None = Header(default=None),
) -> BatchResult:
    outcome = await _hash_upload(request, file, algorithm, authorization)
    return _batch_result(request, outcome)


@app.post("/api/v1/digest/export")
async def digest_export_endpoint(
    request: Request,
    payload: BatchDigestRequest,
    authorization: str | None = Header(default=None),
) -> Response:
    outcome = await _hash_textarea(request, payload, authorization)
    return _csv_response(outcome)


@app.post("/api/v1/digest/file/export")
async def digest_file_export_endpoint(
    request: Request,
    file: UploadFile = File(...),
    algorithm: str = Form("md5"),
    authorization: str | None = Header(default=None),
) -> Response:
    outcome = await _hash_upload(request, file, algorithm, authorization)
    return _csv_response(outcome)


@app.get("/api/v1/audit/logs")
async def get_audit_logs(
    limit: Optional[int] = None,
    algorithm: Optional[str] = None,
    status: Optional[str] = None,
    authorization: str | None = Header(default=None),
) -> List[AuditRecord]:
    verify_bearer_token(authorization)
    return read_audit_logs(limit=limit, algorithm=algorithm, status=status)


def _resolve(request: Request, algorithm: object) -> HashAlgorithm:
    resolved = resolve_algorithm(algorithm)
    request.state.algorithm = resolved.value
    update_request_context(algorithm=resolved.value)
    return resolved


async def _hash_textarea(request: Request, payload: BatchDigestRequest, authorization: str | None) -> BatchOutcome:
    _require_audit_ready()
    verify_bearer_token(authorization)
    algorithm = _resolve(request, payload.algorithm)
    if not trim_text(payload.emails):
        raise MalformedInputError("Please enter at least one email address", "EMPTY_INPUT")
    # Pure-Python MD5 over a large batch must not hold the event loop.
    outcome = await run_in_threadpool(hash_emails, parse_email_lines(payload.emails), algorithm)
    _record_success(request, algorithm, email_count=len(outcome.results))
    return outcome


async def _hash_upload(
    request: Request,
    file: UploadFile,
    algorithm: str,
    authorization: str | None,
) -> BatchOutcome:
    _require_audit_ready()
    verify_bearer_token(authorization)
    resolved = _resolve(request, algorithm)
    if not is_supported_upload(file.filename, file.content_type):
        raise MalformedInputError("Please upload a .txt or .csv file", "UNSUPPORTED_FILE_TYPE")
    if file.size is not None and file.size > config.MAX_UPLOAD_BYTES:
        raise MalformedInputError("Uploaded file is too large", "UPLOAD_TOO_LARGE", http_status=413)
    raw = await file.read(config.MAX_UPLOAD_BYTES + 1)
    if len(raw) > config.MAX_UPLOAD_BYTES:
        raise MalformedInputError("Uploaded file is too large", "UPLOAD_TOO_LARGE", http_status=413)
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedInputError("Failed to decode uploaded file as UTF-8", "PARSE_ERROR") from exc
    outcome = await run_in_threadpool(hash_emails, extract_emails_from_file(text), resolved)
    _record_success(request, resolved, email_count=len(outcome.results))
    return outcome


def _csv_response(outcome: BatchOutcome) -> Response:
    algorithm = resolve_algorithm(outcome.algorithm)
    return Response(
        content=render_csv(outcome.results, algorithm),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(algorithm)}"'},
    )


def _batch_result(request: Request, outcome: BatchOutcome) -> BatchResult:
    algorithm = resolve_algorithm(outcome.algorithm)
    return BatchResult(
        request_id=request.state.request_id,
        algorithm=algorithm.value,
        algorithm_name=ALGORITHM_NAMES[algorithm],
        results=outcome.results,
        invalid_emails=outcome.invalid_emails,
        timestamp=utc_timestamp(),
    )


def _build_error(request: Request, reasons: List[Reason]) -> ErrorResult:
    return ErrorResult(
        request_id=getattr(request.state, "request_id", None) or str(uuid4()),
        reasons=reasons,
        timestamp=utc_timestamp(),
    )


def _record_success(request: Request, algorithm: HashAlgorithm, *, email_count: int) -> None:
    request.state.status = "OK"
    request.state.error_codes = []
    request.state.email_count = email_count
    EMAILS_DIGESTED.labels(algorithm=algorithm.value).inc(email_count)
    append_audit_record(
        AuditRecord(
            request_id=request.state.request_id,
            endpoint=str(request.url.path),
            algorithm=algorithm.value,
            status="OK",
            email_count=email_count,
            timestamp=utc_timestamp(),
        )
    )


def _record_error(request: Request, result: ErrorResult) -> None:
    request.state.status = "ERROR"
    request.state.error_codes = [reason.code for reason in result.reasons]
    request.state.email_count = 0
    if not str(request.url.path).startswith("/api/v1/digest"):
        return
    try:
        append_audit_record(
            AuditRecord(
                request_id=result.request_id,
                endpoint=str(request.url.path),
                algorithm=getattr(request.state, "algorithm", None),
                status="ERROR",
                error_codes=request.state.error_codes,
                timestamp=result.timestamp,
            )
        )
    except OSError:
        log_event(
            event="audit_write_failed",
            log_type="audit",
            level="ERROR",
            error_codes=["AUDIT_UNAVAILABLE"],
        )


def _require_audit_ready() -> None:
    try:
        ensure_audit_log_ready()
    except OSError as exc:
        raise AuditUnavailableError() from exc
