from __future__ import annotations

import hashlib
from typing import Dict, Protocol

from emaildigest.core.exceptions import PrimitiveFailureError


class DigestProvider(Protocol):
    """Anything that can turn bytes into raw digest bytes for a standard algorithm name."""

    def digest(self, data: bytes, algorithm_name: str) -> bytes: ...


class HashlibProvider:
    _HASHLIB_NAMES: Dict[str, str] = {
        "MD5": "md5",
        "SHA-1": "sha1",
        "SHA-256": "sha256",
        "SHA-512": "sha512",
    }

    def digest(self, data: bytes, algorithm_name: str) -> bytes:
        name = self._HASHLIB_NAMES.get(algorithm_name)
        if name is None:
            raise PrimitiveFailureError(f"hashlib provider does not support {algorithm_name}")
        try:
            hasher = hashlib.new(name)
        except ValueError as exc:
            raise PrimitiveFailureError(f"{algorithm_name} is unavailable in this environment") from exc
        hasher.update(data)
        return hasher.digest()


_default_provider = HashlibProvider()


def default_provider() -> DigestProvider:
    return _default_provider
