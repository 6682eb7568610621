from __future__ import annotations

from typing import Optional

from emaildigest.core.utils import to_hex
from emaildigest.digest.algorithms import ALGORITHM_NAMES, HashAlgorithm, resolve_algorithm
from emaildigest.digest.md5 import md5_digest
from emaildigest.digest.providers import DigestProvider, default_provider

# ECMAScript WhiteSpace and LineTerminator, so trimmed addresses hash the same as
# ones produced by browser clients. Unlike str.strip() this includes U+FEFF and
# excludes the \x1c-\x1f separators and U+0085.
TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def trim_text(text: str) -> str:
    return text.strip(TRIM_CHARS)


def normalize_input(text: str) -> bytes:
    """Lowercase, trim and UTF-8 encode ``text`` so equivalent addresses hash identically."""
    return trim_text(text.lower()).encode("utf-8")


def digest(text: str, algorithm: object, provider: Optional[DigestProvider] = None) -> str:
    """Return the lowercase hex digest of the normalized ``text``.

    MD5 is computed in-process; the SHA family is delegated to ``provider``
    (hashlib by default). Provider errors propagate unchanged.
    """
    resolved = resolve_algorithm(algorithm)
    payload = normalize_input(text)
    if resolved is HashAlgorithm.MD5:
        raw = md5_digest(payload)
    else:
        raw = (provider or default_provider()).digest(payload, ALGORITHM_NAMES[resolved])
    return to_hex(raw)
