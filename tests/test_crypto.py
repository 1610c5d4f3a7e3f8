"""Crypto tests — CHIP, derived key, QSIG and BLAKE3 digest.

Tests cover:
    - CHIP: 12 lowercase hex, salt-dependent, secret-independent
    - compute_signatures: full-length hex, secret and salt sensitivity
    - Construction matches HMAC-SHA3-256 / BLAKE3 over the derived key
    - Empty secret rejected
"""

import hashlib
import hmac
import re

import pytest
from blake3 import blake3

from hcs.crypto import compute_signatures, derive_key, generate_chip
from hcs.errors import ConfigurationError
from hcs.normalizer import normalize_profile

HEX12 = re.compile(r"^[0-9a-f]{12}$")
HEX64 = re.compile(r"^[0-9a-f]{64}$")


# ─── CHIP ─────────────────────────────────────────────────────────────────────

def test_chip_format_and_construction(salt, air_profile):
    normalized = normalize_profile(air_profile)
    chip = generate_chip(salt, normalized)
    assert HEX12.match(chip)
    assert chip == hashlib.sha256(salt + normalized.to_json()).hexdigest()[:12]


def test_chip_depends_on_salt(air_profile):
    normalized = normalize_profile(air_profile)
    assert generate_chip(b"\x00" * 32, normalized) != generate_chip(b"\x01" * 32, normalized)


# ─── Signatures ───────────────────────────────────────────────────────────────

def test_signature_construction(salt, secret):
    canonical = b'{"normalized":{}}'
    qsig, b3 = compute_signatures(canonical, secret, salt)

    key = hmac.new(secret, salt, hashlib.sha3_256).digest()
    assert derive_key(secret, salt) == key
    assert qsig == hmac.new(key, canonical, hashlib.sha3_256).hexdigest()
    assert b3 == blake3(key + canonical).hexdigest()
    assert HEX64.match(qsig) and HEX64.match(b3)


def test_signatures_depend_on_secret(salt, secret):
    canonical = b"payload"
    other = bytes.fromhex("b2" * 32)
    a = compute_signatures(canonical, secret, salt)
    b = compute_signatures(canonical, other, salt)
    assert a[0] != b[0]
    assert a[1] != b[1]


def test_signatures_depend_on_salt(secret):
    canonical = b"payload"
    assert compute_signatures(canonical, secret, b"a" * 32) != compute_signatures(canonical, secret, b"b" * 32)


def test_signatures_depend_on_canonical(salt, secret):
    assert compute_signatures(b"a", secret, salt)[0] != compute_signatures(b"b", secret, salt)[0]


def test_empty_secret_rejected(salt):
    with pytest.raises(ConfigurationError):
        compute_signatures(b"payload", b"", salt)
