from __future__ import annotations

import hashlib

import pytest

from emaildigest.digest.md5 import md5_digest, md5_hexdigest, pad_message


RFC1321_VECTORS = [
    (b"", "d41d8cd98f00b204e9800998ecf8427e"),
    (b"a", "0cc175b9c0f1b6a831c399e269772661"),
    (b"abc", "900150983cd24fb0d6963f7d28e17f72"),
    (b"message digest", "f96b697d7cb7938d525a2f31aaf161d0"),
    (b"abcdefghijklmnopqrstuvwxyz", "c3fcd3d76192e4007dfb496cca67e13b"),
    (
        b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        "d174ab98d277d9f5a5611c2c9f419d9f",
    ),
    (
        b"12345678901234567890123456789012345678901234567890123456789012345678901234567890",
        "57edf4a22be3c955ac49da2e2107b67a",
    ),
]


@pytest.mark.parametrize("message,expected", RFC1321_VECTORS)
def test_rfc1321_test_suite(message: bytes, expected: str) -> None:
    assert md5_hexdigest(message) == expected


def test_empty_input_digest() -> None:
    assert md5_digest(b"").hex() == "d41d8cd98f00b204e9800998ecf8427e"
    assert len(md5_digest(b"")) == 16


@pytest.mark.parametrize("length", [55, 56, 57, 63, 64, 65, 119, 120, 128])
def test_padding_boundaries_match_hashlib(length: int) -> None:
    message = bytes((i * 7) % 256 for i in range(length))
    assert md5_hexdigest(message) == hashlib.md5(message).hexdigest()


@pytest.mark.parametrize("length", [0, 1, 55, 56, 63, 64, 100, 1000])
def test_padded_length_is_block_multiple(length: int) -> None:
    padded = pad_message(b"x" * length)
    assert len(padded) % 64 == 0
    assert 9 <= len(padded) - length <= 72
    assert padded[length] == 0x80
    assert int.from_bytes(padded[-8:], "little") == length * 8


def test_fifty_six_bytes_needs_second_block() -> None:
    assert len(pad_message(b"a" * 55)) == 64
    assert len(pad_message(b"a" * 56)) == 128


def test_large_input_digest() -> None:
    message = b"The quick brown fox jumps over the lazy dog. " * 500
    digest = md5_digest(message)
    assert len(digest) == 16
    assert digest == hashlib.md5(message).digest()


def test_utf8_bytes() -> None:
    message = "josé@exämple.com".encode("utf-8")
    assert md5_hexdigest(message) == hashlib.md5(message).hexdigest()


def test_known_sentence() -> None:
    assert md5_hexdigest(b"The quick brown fox jumps over the lazy dog") == "9e107d9d372bb6826bd81d3542a419d6"
