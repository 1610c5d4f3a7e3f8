"""
HCS-U4 — compact transport form.

  HCS-U4|<base64url, no padding, of {"chip": ..., "profile": {normalized}}>
"""
import base64
import binascii
import json

from hcs.errors import ValidationError
from hcs.normalizer import NormalizedProfile

U4_PREFIX = "HCS-U4|"


def encode_u4(normalized: NormalizedProfile, chip: str) -> str:
    payload = {"chip": chip, "profile": normalized.to_dict()}
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    encoded = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
    return U4_PREFIX + encoded


def decode_u4(code: str) -> tuple[NormalizedProfile, str]:
    """Return (normalized profile, chip); ValidationError on any malformed input."""
    if not code.startswith(U4_PREFIX):
        raise ValidationError("invalid HCS-U4 format", field="code")

    encoded = code[len(U4_PREFIX):]
    if any(c in "+/=" for c in encoded):
        raise ValidationError("U4 payload must be unpadded base64url", field="code")
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        payload = json.loads(raw)
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationError(f"failed to decode U4: {e}", field="code") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("profile"), dict):
        raise ValidationError("U4 payload is missing the profile", field="code")
    return NormalizedProfile.from_dict(payload["profile"]), str(payload.get("chip", ""))
