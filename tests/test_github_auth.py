"""Tests for webhook signature verification."""

import pytest

from release_butler.errors import InvalidSignature, MalformedBody, RequiredHeadersNotAvailable
from release_butler.utils.github_auth import generate_hmac_sha256_hex, verify_webhook_signature


def test_hmac_hex():
    """Test digest against a known HMAC-SHA256 value."""
    actual = generate_hmac_sha256_hex(b"Sample Payload", b"abc123")

    assert actual == "4a91576675ad4b18544e6108b9eaf06c4b5f799cf6ca9bde7ea83c04ec6eff7f"


def test_valid_signature():
    body = b'{"zen": "Keep it logically awesome."}'
    signature = "sha256=" + generate_hmac_sha256_hex(body, b"secret")

    verify_webhook_signature(body, signature, "secret")


def test_uppercase_hex_is_accepted():
    body = b"Hello World!"
    signature = "sha256=" + generate_hmac_sha256_hex(body, b"abc").upper()

    verify_webhook_signature(body, signature, "abc")


def test_signature_mismatch():
    body = b"Hello World!"
    signature = "sha256=" + generate_hmac_sha256_hex(body, b"other-secret")

    with pytest.raises(InvalidSignature):
        verify_webhook_signature(body, signature, "abc")


def test_tampered_body():
    signature = "sha256=" + generate_hmac_sha256_hex(b"Hello World!", b"abc")

    with pytest.raises(InvalidSignature):
        verify_webhook_signature(b"Hello World?", signature, "abc")


@pytest.mark.parametrize("header", [None, "", "2299e6c07452bec21c4b8c341de2052b", "sha1=abc"])
def test_missing_or_unprefixed_header(header):
    with pytest.raises(RequiredHeadersNotAvailable):
        verify_webhook_signature(b"Hello World!", header, "abc")


def test_non_hex_signature():
    with pytest.raises(MalformedBody):
        verify_webhook_signature(b"Hello World!", "sha256=not-hex!", "abc")
