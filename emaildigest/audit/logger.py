from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from emaildigest.core import config
from emaildigest.core.models import AuditRecord


def append_audit_record(record: AuditRecord) -> None:
    path = _audit_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(record.model_dump_json() + "\n")


def read_audit_logs(
    limit: Optional[int] = None,
    algorithm: Optional[str] = None,
    status: Optional[str] = None,
) -> List[AuditRecord]:
    path = _audit_path()
    if not path.exists():
        return []
    records: List[AuditRecord] = []
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                record = AuditRecord(**json.loads(line))
            except (json.JSONDecodeError, TypeError, ValidationError):
                continue
            if algorithm and record.algorithm != algorithm:
                continue
            if status and record.status != status:
                continue
            records.append(record)
            if limit is not None and len(records) >= limit:
                break
    return records


def ensure_audit_log_ready() -> None:
    path = _audit_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8"):
        return


def _audit_path() -> Path:
    return Path(config.AUDIT_LOG_PATH)
