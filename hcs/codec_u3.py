"""
HCS-U3 — human-readable segmented code.

  HCS-U3|E:F|MOD:c50f30m20|COG:F60C40V70S50Cr80|INT:PB=F,SM=M,TN=S|CHIP:abc123def456

The E / MOD / COG / INT segments are shared with U7.
"""
import re

from hcs.errors import ValidationError
from hcs.model import InputProfile
from hcs.normalizer import NormalizedProfile, normalize_profile

U3_PREFIX = "HCS-U3"

PROFILE_SEGMENTS = (
    r"E:(?P<element>[AEWF])"
    r"\|MOD:c(?P<modal_cardinal>100|\d{2})f(?P<modal_fixed>100|\d{2})m(?P<modal_mutable>100|\d{2})"
    r"\|COG:F(?P<cog_fluid>100|\d{2})C(?P<cog_crystallized>100|\d{2})V(?P<cog_verbal>100|\d{2})"
    r"S(?P<cog_strategic>100|\d{2})Cr(?P<cog_creative>100|\d{2})"
    r"\|INT:PB=(?P<int_pace>[BFS]),SM=(?P<int_structure>[LMH]),TN=(?P<int_tone>[WNSP])"
)

U3_PATTERN = re.compile(r"^HCS-U3\|" + PROFILE_SEGMENTS + r"\|CHIP:(?P<chip>[0-9a-f]{12})$")


def profile_segments(normalized: NormalizedProfile) -> list[str]:
    """E, MOD, COG and INT segments. A value of 100 prints as three digits."""
    n = normalized
    return [
        f"E:{n.element}",
        f"MOD:c{n.modal_c:02d}f{n.modal_f:02d}m{n.modal_m:02d}",
        f"COG:F{n.cog_f:02d}C{n.cog_c:02d}V{n.cog_v:02d}S{n.cog_s:02d}Cr{n.cog_cr:02d}",
        f"INT:PB={n.pace},SM={n.structure},TN={n.tone}",
    ]


def encode_u3(profile: InputProfile, chip: str) -> str:
    segments = [U3_PREFIX, *profile_segments(normalize_profile(profile)), f"CHIP:{chip}"]
    return "|".join(segments)


def validate_u3_format(code: str) -> bool:
    return U3_PATTERN.match(code) is not None


def parse_u3(code: str) -> dict[str, str]:
    """
    Split a U3 code into its named fields (all values as strings).

    Raises ValidationError if the code does not match the strict format.
    """
    match = U3_PATTERN.match(code)
    if match is None:
        raise ValidationError("invalid HCS-U3 format", field="code")
    return match.groupdict()
