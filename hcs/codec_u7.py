"""
HCS-U7 — signed code.

  HCS-U7|V:7.0|ALG:QS|E:..|MOD:..|COG:..|INT:..|QSIG:<24 hex>|B3:<32 hex>

Profile segments are the U3 ones, rebuilt from the normalized profile.
Signatures are truncated inline; the full values travel in the JSON output.
"""
import re

from hcs.codec_u3 import PROFILE_SEGMENTS, profile_segments
from hcs.errors import EncodingError, ValidationError
from hcs.normalizer import NormalizedProfile

U7_HEADER = "HCS-U7|V:7.0|ALG:QS"
QSIG_INLINE = 24
B3_INLINE = 32

U7_PATTERN = re.compile(
    r"^HCS-U7\|V:(?P<version>7\.0)\|ALG:(?P<alg>QS)\|"
    + PROFILE_SEGMENTS
    + r"\|QSIG:(?P<qsig>[0-9a-f]{1,24})\|B3:(?P<b3>[0-9a-f]{1,32})$"
)


def format_u7(normalized: NormalizedProfile, qsig_hex: str, b3_hex: str) -> str:
    if not qsig_hex or not b3_hex:
        raise EncodingError("signatures must not be empty")
    segments = [
        U7_HEADER,
        *profile_segments(normalized),
        f"QSIG:{qsig_hex[:QSIG_INLINE]}",
        f"B3:{b3_hex[:B3_INLINE]}",
    ]
    return "|".join(segments)


def validate_u7_format(code: str) -> bool:
    return U7_PATTERN.match(code) is not None


def parse_u7(code: str) -> dict[str, str]:
    """Named fields of a U7 code (version, alg, profile fields, qsig, b3)."""
    match = U7_PATTERN.match(code)
    if match is None:
        raise ValidationError("invalid HCS-U7 format", field="code")
    return match.groupdict()
