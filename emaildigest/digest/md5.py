"""Pure-Python MD5 (RFC 1321).

Kept byte-compatible with the reference algorithm so that digests produced here
match every other MD5 implementation. All word arithmetic is masked to 32 bits.
"""

from __future__ import annotations

import struct
from typing import Callable, Tuple

DIGEST_SIZE = 16
BLOCK_SIZE = 64

_MASK = 0xFFFFFFFF

_INITIAL_STATE: Tuple[int, int, int, int] = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

# floor(abs(sin(j + 1)) * 2**32)
_K: Tuple[int, ...] = (
    0xD76AA478, 0xE8C7B756, 0x242070DB, 0xC1BDCEEE,
    0xF57C0FAF, 0x4787C62A, 0xA8304613, 0xFD469501,
    0x698098D8, 0x8B44F7AF, 0xFFFF5BB1, 0x895CD7BE,
    0x6B901122, 0xFD987193, 0xA679438E, 0x49B40821,
    0xF61E2562, 0xC040B340, 0x265E5A51, 0xE9B6C7AA,
    0xD62F105D, 0x02441453, 0xD8A1E681, 0xE7D3FBC8,
    0x21E1CDE6, 0xC33707D6, 0xF4D50D87, 0x455A14ED,
    0xA9E3E905, 0xFCEFA3F8, 0x676F02D9, 0x8D2A4C8A,
    0xFFFA3942, 0x8771F681, 0x6D9D6122, 0xFDE5380C,
    0xA4BEEA44, 0x4BDECFA9, 0xF6BB4B60, 0xBEBFBC70,
    0x289B7EC6, 0xEAA127FA, 0xD4EF3085, 0x04881D05,
    0xD9D4D039, 0xE6DB99E5, 0x1FA27CF8, 0xC4AC5665,
    0xF4292244, 0x432AFF97, 0xAB9423A7, 0xFC93A039,
    0x655B59C3, 0x8F0CCC92, 0xFFEFF47D, 0x85845DD1,
    0x6FA87E4F, 0xFE2CE6E0, 0xA3014314, 0x4E0811A1,
    0xF7537E82, 0xBD3AF235, 0x2AD7D2BB, 0xEB86D391,
)

_S: Tuple[int, ...] = (
    (7, 12, 17, 22) * 4
    + (5, 9, 14, 20) * 4
    + (4, 11, 16, 23) * 4
    + (6, 10, 15, 21) * 4
)

# Message word used by each round.
_G: Tuple[int, ...] = (
    tuple(range(16))
    + tuple((5 * j + 1) % 16 for j in range(16, 32))
    + tuple((3 * j + 5) % 16 for j in range(32, 48))
    + tuple((7 * j) % 16 for j in range(48, 64))
)


def _f(b: int, c: int, d: int) -> int:
    return (b & c) | (~b & d)


def _g(b: int, c: int, d: int) -> int:
    return (b & d) | (c & ~d)


def _h(b: int, c: int, d: int) -> int:
    return b ^ c ^ d


def _i(b: int, c: int, d: int) -> int:
    return c ^ (b | (~d & _MASK))


_MIXERS: Tuple[Callable[[int, int, int], int], ...] = (_f, _g, _h, _i)

_WORDS = struct.Struct("<16I")
_STATE = struct.Struct("<4I")
_LENGTH = struct.Struct("<Q")


def _rotate_left(value: int, amount: int) -> int:
    return ((value << amount) | (value >> (32 - amount))) & _MASK


def pad_message(data: bytes) -> bytes:
    """Apply MD5 padding: 0x80, zeros up to 56 mod 64, then the bit length (LE, 64-bit)."""
    bit_length = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (55 - len(data)) % BLOCK_SIZE
    return data + b"\x80" + b"\x00" * zeros + _LENGTH.pack(bit_length)


def _compress(state: Tuple[int, int, int, int], block: bytes) -> Tuple[int, int, int, int]:
    words = _WORDS.unpack(block)
    a, b, c, d = state
    for j in range(64):
        mixed = _MIXERS[j >> 4](b, c, d)
        f = (a + mixed + _K[j] + words[_G[j]]) & _MASK
        a, b, c, d = d, (b + _rotate_left(f, _S[j])) & _MASK, b, c
    return (
        (state[0] + a) & _MASK,
        (state[1] + b) & _MASK,
        (state[2] + c) & _MASK,
        (state[3] + d) & _MASK,
    )


def md5_digest(data: bytes) -> bytes:
    """Return the 16-byte MD5 digest of ``data``."""
    padded = pad_message(bytes(data))
    state = _INITIAL_STATE
    for offset in range(0, len(padded), BLOCK_SIZE):
        state = _compress(state, padded[offset : offset + BLOCK_SIZE])
    return _STATE.pack(*state)


def md5_hexdigest(data: bytes) -> str:
    return md5_digest(data).hex()


__all__ = [
    "BLOCK_SIZE",
    "DIGEST_SIZE",
    "md5_digest",
    "md5_hexdigest",
    "pad_message",
]
