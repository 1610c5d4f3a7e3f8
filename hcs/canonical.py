"""
Canonical profile bytes — the exact input to the U7 signatures.

Compact JSON with a fixed shape:
  {"normalized": {...}, "chinese": {...}, "fusion": {...}}

Floats are written with exactly four decimals and no quotes so the bytes do
not depend on how a float happens to be printed. "chinese" and "fusion" are
left out when there is no combined profile; "elementBalance" is a list of
{"name", "value"} pairs sorted by name and is left out when empty.
"""
import json
from typing import Optional

from hcs.errors import EncodingError
from hcs.fusion import CombinedProfile
from hcs.normalizer import NormalizedProfile


class Fixed4(float):
    """A float that always encodes as %.4f."""


def _encode(value) -> str:
    if isinstance(value, Fixed4):
        return f"{float(value):.4f}"
    if isinstance(value, dict):
        items = (f"{_encode(str(k))}:{_encode(v)}" for k, v in value.items())
        return "{" + ",".join(items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(v) for v in value) + "]"
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return json.dumps(value)
    raise EncodingError(f"cannot encode {type(value).__name__} in canonical profile")


def _chinese_section(combined: CombinedProfile) -> dict:
    ch = combined.chinese
    section = {
        "yearPillar": ch.year_pillar,
        "monthPillar": ch.month_pillar,
        "dayPillar": ch.day_pillar,
        "hourPillar": ch.hour_pillar,
        "yinYangBalance": Fixed4(ch.yin_yang_balance),
    }
    if ch.element_balance:
        section["elementBalance"] = [
            {"name": name, "value": Fixed4(ch.element_balance[name])}
            for name in sorted(ch.element_balance)
        ]
    section["dayMaster"] = ch.day_master
    section["dayMasterStrength"] = Fixed4(ch.day_master_strength)
    return section


def _fusion_section(combined: CombinedProfile) -> dict:
    f = combined.fusion
    return {
        "fusionId": f.fusion_id,
        "unifiedBalance": Fixed4(f.unified_balance),
        "harmonicResonance": Fixed4(f.harmonic_resonance),
    }


def canonical_profile_data(
    normalized: NormalizedProfile,
    combined: Optional[CombinedProfile] = None,
) -> bytes:
    """Deterministic bytes for the normalized profile plus optional combined profile."""
    data = {"normalized": normalized.to_dict()}
    if combined is not None:
        data["chinese"] = _chinese_section(combined)
        data["fusion"] = _fusion_section(combined)
    return _encode(data).encode("utf-8")
