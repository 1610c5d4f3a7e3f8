"""
HCS-U5 — bit-packed fusion code.

  HCS-U5|<fusion id>|W:<4 hex>|C:<4 hex>|F:<4 hex>|CHIP:<12 hex>

Each hex word is 16 bits:

  Western  15-14 element  12-10 cardinal  9-7 fixed  6-4 mutable
           3-2 pace  1 high structure  0 sharp/precise tone
  Chinese  15-13 dominant element  12-10 yin/yang  9-6 day master
           5-3 day-master strength  2-0 element skew
  Fusion   15-12 cognitive pattern  11-9 pace  8-6 intensity
           5-3 unified balance  2-0 harmonic resonance

Ratios are clamped to [0, 1] and scaled to 0–7 (truncated) before packing.

The U5 CHIP hashes a field-labelled text rendering of the three profiles
(see debug_repr), not the canonical bytes used for U7.
"""
import dataclasses
import hashlib
import math
from dataclasses import dataclass
from decimal import Decimal

import config
from hcs.bazi import ChineseProfile
from hcs.errors import ValidationError
from hcs.fusion import CognitiveFusion, FusionProfile, WesternProfile
from hcs.normalizer import clamp

U5_PREFIX = "HCS-U5|"
U5_MIN_LENGTH = 30
U5_REQUIRED_SEGMENTS = ("|W:", "|C:", "|F:", "|CHIP:")
FUSION_ID_FALLBACK = "XX"

WESTERN_ELEMENT_BITS = {"Fire": 0, "Earth": 1, "Air": 2, "Water": 3}
PACE_BITS = {"slow": 0, "balanced": 1, "fast": 2}
CHINESE_ELEMENT_BITS = {name: i for i, name in enumerate(config.CHINESE_ELEMENTS)}
COGNITIVE_TRAITS = ("analytical", "creative", "grounded", "adaptive", "expressive")


def scale7(value: float) -> int:
    """Clamp a ratio and map it onto 0–7 by truncation."""
    return int(clamp(value) * 7)


def _name_for(table: dict, bits: int) -> str:
    for name, value in table.items():
        if value == bits:
            return name
    return ""


# ── Words ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WesternWord:
    element: int
    cardinal: int
    fixed: int
    mutable: int
    pace: int
    high_structure: bool
    sharp_tone: bool

    @classmethod
    def from_profile(cls, western: WesternProfile) -> "WesternWord":
        inter = western.interaction
        return cls(
            element=WESTERN_ELEMENT_BITS.get(western.dominant_element, 0),
            cardinal=scale7(western.modal.cardinal),
            fixed=scale7(western.modal.fixed),
            mutable=scale7(western.modal.mutable),
            pace=PACE_BITS.get(inter.pace, 0),
            high_structure=inter.structure == "high",
            sharp_tone=inter.tone in ("sharp", "precise"),
        )

    def pack(self) -> int:
        return (
            (self.element & 0x3) << 14
            | (self.cardinal & 0x7) << 10
            | (self.fixed & 0x7) << 7
            | (self.mutable & 0x7) << 4
            | (self.pace & 0x3) << 2
            | int(self.high_structure) << 1
            | int(self.sharp_tone)
        )

    @classmethod
    def unpack(cls, word: int) -> "WesternWord":
        return cls(
            element=(word >> 14) & 0x3,
            cardinal=(word >> 10) & 0x7,
            fixed=(word >> 7) & 0x7,
            mutable=(word >> 4) & 0x7,
            pace=(word >> 2) & 0x3,
            high_structure=bool((word >> 1) & 0x1),
            sharp_tone=bool(word & 0x1),
        )

    @property
    def element_name(self) -> str:
        return _name_for(WESTERN_ELEMENT_BITS, self.element)

    @property
    def pace_name(self) -> str:
        return _name_for(PACE_BITS, self.pace)


@dataclass(frozen=True)
class ChineseWord:
    element: int
    yin_yang: int
    day_master: int
    strength: int
    skew: int

    @classmethod
    def from_profile(cls, chinese: ChineseProfile) -> "ChineseWord":
        return cls(
            element=CHINESE_ELEMENT_BITS.get(chinese.dominant_element(), 0),
            yin_yang=scale7(chinese.yin_yang_balance),
            day_master=chinese.day_master_index(),
            strength=scale7(chinese.day_master_strength),
            skew=scale7(element_skew(chinese.element_balance)),
        )

    def pack(self) -> int:
        return (
            (self.element & 0x7) << 13
            | (self.yin_yang & 0x7) << 10
            | (self.day_master & 0xF) << 6
            | (self.strength & 0x7) << 3
            | (self.skew & 0x7)
        )

    @classmethod
    def unpack(cls, word: int) -> "ChineseWord":
        return cls(
            element=(word >> 13) & 0x7,
            yin_yang=(word >> 10) & 0x7,
            day_master=(word >> 6) & 0xF,
            strength=(word >> 3) & 0x7,
            skew=word & 0x7,
        )

    @property
    def element_name(self) -> str:
        return _name_for(CHINESE_ELEMENT_BITS, self.element)

    @property
    def day_master_name(self) -> str:
        if self.day_master < len(config.HEAVENLY_STEMS):
            return config.HEAVENLY_STEMS[self.day_master][0]
        return ""


@dataclass(frozen=True)
class FusionWord:
    pattern: int
    pace: int
    intensity: int
    balance: int
    resonance: int

    @classmethod
    def from_profile(cls, fusion: FusionProfile) -> "FusionWord":
        return cls(
            pattern=cognitive_pattern(fusion.cognitive_fusion),
            pace=scale7(fusion.tempo_signals.pace),
            intensity=scale7(fusion.tempo_signals.intensity),
            balance=scale7(fusion.unified_balance),
            resonance=scale7(fusion.harmonic_resonance),
        )

    def pack(self) -> int:
        return (
            (self.pattern & 0xF) << 12
            | (self.pace & 0x7) << 9
            | (self.intensity & 0x7) << 6
            | (self.balance & 0x7) << 3
            | (self.resonance & 0x7)
        )

    @classmethod
    def unpack(cls, word: int) -> "FusionWord":
        return cls(
            pattern=(word >> 12) & 0xF,
            pace=(word >> 9) & 0x7,
            intensity=(word >> 6) & 0x7,
            balance=(word >> 3) & 0x7,
            resonance=word & 0x7,
        )


def element_skew(balance: dict[str, float]) -> float:
    """0 for a perfectly even five-element spread, rising towards 1 when skewed."""
    mean = 0.2
    total = 0.0
    for value in balance.values():
        diff = value - mean
        total += diff * diff
    return clamp(total / 5 * 10)


def cognitive_pattern(cog: CognitiveFusion) -> int:
    """
    4-bit pattern: primary trait index in the high bits, secondary in the low two.

    Traits are scanned analytical → expressive; the first strict maximum wins
    for both picks. Primary indices above 3 wrap within 4 bits.
    """
    traits = cog.traits()

    primary, best = 0, 0.0
    for i, value in enumerate(traits):
        if value > best:
            primary, best = i, value

    secondary, second_best = 0, 0.0
    for i, value in enumerate(traits):
        if i != primary and value > second_best:
            secondary, second_best = i, value

    return ((primary << 2) | (secondary & 0x3)) & 0xF


# ── Debug representation ──────────────────────────────────────────────────────
#
# Renders records as {Field:value ...} with CamelCase field labels, maps as
# map[key:value ...] in sorted key order and floats in their shortest
# round-trip digits. This text is what the U5 CHIP hashes, so its exact shape
# is frozen.

def _label(f: dataclasses.Field) -> str:
    if "label" in f.metadata:
        return f.metadata["label"]
    return "".join(part.capitalize() for part in f.name.split("_"))


def format_float(value: float) -> str:
    """
    Shortest round-trip digits; exponent form when the exponent is < -4 or >= 6.

      0.5 → 0.5   1.0 → 1   1e-05 → 1e-05   1234567.0 → 1.234567e+06
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    prefix = "-" if sign else ""
    point = len(digits) + exponent
    exp = point - 1

    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _render(value) -> str:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = " ".join(
            f"{_label(f)}:{_render(getattr(value, f.name))}" for f in dataclasses.fields(value)
        )
        return "{" + fields + "}"
    if isinstance(value, dict):
        items = " ".join(f"{k}:{_render(value[k])}" for k in sorted(value))
        return f"map[{items}]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def debug_repr(record) -> str:
    """Top-level rendering of a record: &{Field:value ...}."""
    return "&" + _render(record)


# ── Codec ─────────────────────────────────────────────────────────────────────

def generate_u5_chip(
    western: WesternProfile,
    chinese: ChineseProfile,
    fusion: FusionProfile,
    salt: bytes,
) -> str:
    data = f"U5|W:{debug_repr(western)}|C:{debug_repr(chinese)}|F:{debug_repr(fusion)}"
    return hashlib.sha256(salt + data.encode("utf-8")).hexdigest()[:12]


def encode_u5(
    western: WesternProfile,
    chinese: ChineseProfile,
    fusion: FusionProfile,
    salt: bytes,
) -> str:
    fusion_id = fusion.fusion_id if len(fusion.fusion_id) == 2 else FUSION_ID_FALLBACK
    w = WesternWord.from_profile(western).pack()
    c = ChineseWord.from_profile(chinese).pack()
    f = FusionWord.from_profile(fusion).pack()
    chip = generate_u5_chip(western, chinese, fusion, salt)
    return f"{U5_PREFIX}{fusion_id}|W:{w:04x}|C:{c:04x}|F:{f:04x}|CHIP:{chip}"


def validate_u5_format(code: str) -> bool:
    """Loose structural check: prefix, minimum length and the four tagged segments."""
    if len(code) < U5_MIN_LENGTH or not code.startswith(U5_PREFIX):
        return False
    return all(segment in code for segment in U5_REQUIRED_SEGMENTS)


def decode_u5(code: str) -> dict[str, str]:
    """
    Pull the raw components out of a U5 code.

    Returns fusionId plus whichever of western / chinese / fusion (4 hex each)
    and chip (12 hex) are present. Raises ValidationError on a malformed code.
    """
    if not validate_u5_format(code):
        raise ValidationError("invalid HCS-U5 format", field="code")

    components = {"fusionId": code[len(U5_PREFIX):len(U5_PREFIX) + 2]}

    segments = {}
    for part in code.split("|")[2:]:
        tag, sep, value = part.partition(":")
        if sep and tag not in segments:
            segments[tag] = value

    for tag, name in (("W", "western"), ("C", "chinese"), ("F", "fusion")):
        if len(segments.get(tag, "")) >= 4:
            components[name] = segments[tag][:4]
    if len(segments.get("CHIP", "")) >= 12:
        components["chip"] = segments["CHIP"][:12]
    return components
