from __future__ import annotations

import hashlib
from datetime import date

import pytest

from emaildigest.batch.export import export_filename, render_csv
from emaildigest.batch.parsing import (
    extract_emails_from_file,
    is_supported_upload,
    is_valid_email,
    parse_email_lines,
)
from emaildigest.batch.processor import hash_emails
from emaildigest.core.exceptions import MalformedInputError, UnsupportedAlgorithmError
from emaildigest.core.models import EmailDigest


def test_email_validation() -> None:
    assert is_valid_email("user@example.com")
    assert is_valid_email("first.last+tag@sub.example.co.uk")
    assert not is_valid_email("user@example")
    assert not is_valid_email("user example@example.com")
    assert not is_valid_email("@example.com")
    assert not is_valid_email("user@@example.com")


def test_parse_email_lines_drops_blank_lines() -> None:
    text = "  a@example.com\n\n b@example.com \n   \nnot-an-email\n"
    assert parse_email_lines(text) == ["a@example.com", "b@example.com", "not-an-email"]


def test_extract_emails_from_csv_skips_header_and_picks_email_column() -> None:
    text = 'name,email\r\n"Ann","ann@example.com"\r\nBob, bob@example.com ,x\r\n\r\n'
    assert extract_emails_from_file(text) == ["ann@example.com", "bob@example.com"]


def test_extract_emails_from_plain_text() -> None:
    text = "one@example.com\ntwo@example.com\nno email here\n"
    assert extract_emails_from_file(text) == ["one@example.com", "two@example.com"]


def test_supported_uploads() -> None:
    assert is_supported_upload("emails.txt", None)
    assert is_supported_upload("emails.csv", "application/octet-stream")
    assert is_supported_upload("blob", "text/csv; charset=utf-8")
    assert is_supported_upload(None, "application/csv")
    assert not is_supported_upload("emails.xlsx", "application/vnd.ms-excel")
    assert not is_supported_upload(None, None)


def test_hash_emails_skips_invalid_and_normalizes() -> None:
    outcome = hash_emails(["User@Example.com", "broken", "two@example.org"], "sha1")
    assert outcome.algorithm == "sha1"
    assert outcome.invalid_emails == ["broken"]
    assert [r.email for r in outcome.results] == ["user@example.com", "two@example.org"]
    assert outcome.results[0].hash == hashlib.sha1(b"user@example.com").hexdigest()


def test_hash_emails_without_valid_entries() -> None:
    with pytest.raises(MalformedInputError) as excinfo:
        hash_emails(["nope", "still nope"], "md5")
    assert excinfo.value.code == "NO_VALID_EMAILS"


def test_hash_emails_rejects_unknown_algorithm_first() -> None:
    with pytest.raises(UnsupportedAlgorithmError):
        hash_emails([], "crc32")


def test_render_csv() -> None:
    results = [
        EmailDigest(email="a@example.com", hash="aa"),
        EmailDigest(email="b@example.com", hash="bb"),
    ]
    assert render_csv(results, "sha256") == "Email,SHA-256 Hash\na@example.com,aa\nb@example.com,bb\n"


def test_export_filename() -> None:
    assert export_filename("md5", on=date(2024, 3, 9)) == "email_md5_hashes_2024-03-09.csv"


def test_parsing_trims_byte_order_mark() -> None:
    assert parse_email_lines("\ufeffa@example.com\n") == ["a@example.com"]
    assert extract_emails_from_file('\ufeff"a@example.com",x') == ["a@example.com"]
