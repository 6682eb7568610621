from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class DigestRequest(BaseModel):
    email: str
    algorithm: Any = "md5"


class BatchDigestRequest(BaseModel):
    emails: str
    algorithm: Any = "md5"


class Reason(BaseModel):
    code: str
    message: str


class AlgorithmInfo(BaseModel):
    id: str
    name: str
    digest_size: int


class EmailDigest(BaseModel):
    email: str
    hash: str


class DigestResult(BaseModel):
    request_id: str
    algorithm: str
    algorithm_name: str
    email: str
    hash: str
    timestamp: str


class BatchResult(BaseModel):
    request_id: str
    algorithm: str
    algorithm_name: str
    results: List[EmailDigest] = Field(default_factory=list)
    invalid_emails: List[str] = Field(default_factory=list)
    timestamp: str


class ErrorResult(BaseModel):
    request_id: str
    status: str = "ERROR"
    reasons: List[Reason] = Field(default_factory=list)
    timestamp: str


class AuditRecord(BaseModel):
    request_id: str
    endpoint: Optional[str] = None
    algorithm: Optional[str] = None
    status: str
    email_count: int = 0
    error_codes: List[str] = Field(default_factory=list)
    timestamp: str


@dataclass(frozen=True)
class BatchOutcome:
    algorithm: str
    results: List[EmailDigest]
    invalid_emails: List[str] = field(default_factory=list)
