from __future__ import annotations

import re
from typing import List, Optional

from emaildigest.digest.dispatcher import trim_text

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

SUPPORTED_CONTENT_TYPES = {"text/plain", "text/csv", "application/csv"}
SUPPORTED_EXTENSIONS = (".txt", ".csv")


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def parse_email_lines(text: str) -> List[str]:
    """One address per line; blank lines are dropped."""
    lines = [trim_text(line) for line in text.split("\n")]
    return [line for line in lines if line]


def extract_emails_from_file(text: str) -> List[str]:
    """Pull addresses out of a .txt or .csv upload.

    Lines without an ``@`` (headers included) are ignored. For CSV rows the first
    field containing an ``@`` is taken, with quotes stripped.
    """
    emails: List[str] = []
    for raw_line in _LINE_SPLIT_RE.split(text):
        line = trim_text(raw_line)
        if not line or "@" not in line:
            continue
        field = next(part for part in line.split(",") if "@" in part)
        emails.append(trim_text(field).replace("'", "").replace('"', ""))
    return emails


def is_supported_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    if content_type and content_type.split(";", 1)[0].strip() in SUPPORTED_CONTENT_TYPES:
        return True
    return bool(filename) and filename.endswith(SUPPORTED_EXTENSIONS)
