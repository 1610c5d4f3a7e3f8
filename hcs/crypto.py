"""
Hashes and signatures.

  - CHIP: first 12 hex chars of SHA-256(salt ‖ normalized JSON)
  - derived key: HMAC-SHA3-256(secret, salt)
  - QSIG: HMAC-SHA3-256(derived key, canonical bytes)
  - B3: BLAKE3(derived key ‖ canonical bytes)

The salt is public diversification material; the secret never leaves this
module except as the derived key, and neither is logged.
"""
import hashlib
import hmac

from blake3 import blake3

from hcs.errors import ConfigurationError
from hcs.normalizer import NormalizedProfile

CHIP_LENGTH = 12


def generate_chip(salt: bytes, normalized: NormalizedProfile) -> str:
    digest = hashlib.sha256(salt + normalized.to_json()).hexdigest()
    return digest[:CHIP_LENGTH]


def derive_key(secret: bytes, salt: bytes) -> bytes:
    """Per-installation key: the secret keyed over the salt."""
    if not secret:
        raise ConfigurationError("secret key must not be empty")
    return hmac.new(secret, salt, hashlib.sha3_256).digest()


def compute_signatures(canonical: bytes, secret: bytes, salt: bytes) -> tuple[str, str]:
    """
    Return (qsig_hex, b3_hex) over the canonical profile bytes.

    Both are full-length hex (64 chars); U7 truncates them inline.
    Raises ConfigurationError for an empty secret.
    """
    key = derive_key(secret, salt)
    qsig = hmac.new(key, canonical, hashlib.sha3_256).hexdigest()

    hasher = blake3()
    hasher.update(key)
    hasher.update(canonical)
    return qsig, hasher.hexdigest()
