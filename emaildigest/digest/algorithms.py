from __future__ import annotations

from enum import Enum
from typing import Dict, List

from emaildigest.core.exceptions import UnsupportedAlgorithmError


class HashAlgorithm(str, Enum):
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


ALGORITHM_NAMES: Dict[HashAlgorithm, str] = {
    HashAlgorithm.MD5: "MD5",
    HashAlgorithm.SHA1: "SHA-1",
    HashAlgorithm.SHA256: "SHA-256",
    HashAlgorithm.SHA512: "SHA-512",
}

DIGEST_SIZES: Dict[HashAlgorithm, int] = {
    HashAlgorithm.MD5: 16,
    HashAlgorithm.SHA1: 20,
    HashAlgorithm.SHA256: 32,
    HashAlgorithm.SHA512: 64,
}


def resolve_algorithm(algorithm: object) -> HashAlgorithm:
    """Map an identifier such as ``"sha256"`` to its enum member.

    Matching is exact: ``"SHA256"`` or ``" md5"`` are rejected rather than guessed at.
    """
    if isinstance(algorithm, HashAlgorithm):
        return algorithm
    if isinstance(algorithm, str):
        for member in HashAlgorithm:
            if member.value == algorithm:
                return member
    raise UnsupportedAlgorithmError(algorithm)


def get_algorithm_name(algorithm: object) -> str:
    return ALGORITHM_NAMES[resolve_algorithm(algorithm)]


def list_algorithms() -> List[HashAlgorithm]:
    return list(HashAlgorithm)
