from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Optional

from emaildigest.core.models import EmailDigest
from emaildigest.core.utils import utc_today
from emaildigest.digest.algorithms import get_algorithm_name, resolve_algorithm


def render_csv(results: Iterable[EmailDigest], algorithm: object) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Email", f"{get_algorithm_name(algorithm)} Hash"])
    for result in results:
        writer.writerow([result.email, result.hash])
    return buffer.getvalue()


def export_filename(algorithm: object, on: Optional[date] = None) -> str:
    day = on or utc_today()
    return f"email_{resolve_algorithm(algorithm).value}_hashes_{day.isoformat()}.csv"
