from __future__ import annotations

from typing import Iterable, List, Optional

from emaildigest.batch.parsing import is_valid_email
from emaildigest.core.exceptions import MalformedInputError
from emaildigest.core.logging import log_event
from emaildigest.core.models import BatchOutcome, EmailDigest
from emaildigest.digest.algorithms import resolve_algorithm
from emaildigest.digest.dispatcher import digest, trim_text
from emaildigest.digest.providers import DigestProvider


def hash_emails(
    emails: Iterable[str],
    algorithm: object,
    provider: Optional[DigestProvider] = None,
) -> BatchOutcome:
    resolved = resolve_algorithm(algorithm)
    candidates = list(emails)
    valid = [email for email in candidates if is_valid_email(email)]
    invalid = [email for email in candidates if not is_valid_email(email)]

    if invalid:
        log_event(
            event="invalid_emails_skipped",
            log_type="validation",
            level="WARN",
            algorithm=resolved.value,
            error_codes=["INVALID_EMAIL"],
            details={"skipped": len(invalid), "accepted": len(valid)},
        )
    if not valid:
        raise MalformedInputError("No valid email addresses found", "NO_VALID_EMAILS")

    results: List[EmailDigest] = []
    for email in valid:
        clean_email = trim_text(email.lower())
        results.append(EmailDigest(email=clean_email, hash=digest(clean_email, resolved, provider)))
    return BatchOutcome(algorithm=resolved.value, results=results, invalid_emails=invalid)
