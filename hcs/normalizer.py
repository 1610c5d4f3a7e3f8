"""
Normalizer — maps raw profile fields onto the canonical integer/letter form.

Provides:
  - clamp_and_round: ratio → integer percentage 0–100 (half away from zero)
  - letter mappings for element / pace / structure / tone (lenient defaults)
  - normalize_profile: InputProfile → NormalizedProfile
  - validate_profile: strict validation run before output is trusted

Normalization is lenient on purpose: unknown categorical values fall back to
defaults instead of failing. Rejection of genuinely invalid input is the job
of validate_profile, which the generator runs first.
"""
import json
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal

import config
from hcs.bazi import validate_birth_info
from hcs.errors import ValidationError
from hcs.model import InputProfile

ELEMENT_LETTERS = {"Earth": "E", "Air": "A", "Water": "W", "Fire": "F"}
PACE_LETTERS = {"balanced": "B", "fast": "F", "slow": "S"}
STRUCTURE_LETTERS = {"low": "L", "medium": "M", "high": "H"}
TONE_LETTERS = {"warm": "W", "neutral": "N", "sharp": "S", "precise": "P"}


def clamp(value: float) -> float:
    """Clamp a ratio into [0, 1]."""
    return max(0.0, min(1.0, value))


def clamp_and_round(value: float) -> int:
    """
    Clamp a ratio into [0, 1] and convert it to an integer percentage.

    Rounding is half away from zero on the exact binary value of value*100:
      0.314 → 31, 0.315 → 32, 0.5 → 50, 1.0 → 100, -0.5 → 0
    """
    scaled = Decimal(clamp(value) * 100)
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def element_letter(element: str) -> str:
    return ELEMENT_LETTERS.get(element, ELEMENT_LETTERS[config.ELEMENTS[0]])


def pace_letter(pace: str) -> str:
    return PACE_LETTERS.get(pace, PACE_LETTERS[config.DEFAULT_PACE])


def structure_letter(structure: str) -> str:
    return STRUCTURE_LETTERS.get(structure, STRUCTURE_LETTERS[config.DEFAULT_STRUCTURE])


def tone_letter(tone: str) -> str:
    return TONE_LETTERS.get(tone, TONE_LETTERS[config.DEFAULT_TONE])


@dataclass(frozen=True)
class NormalizedProfile:
    element: str
    modal_c: int
    modal_f: int
    modal_m: int
    cog_f: int
    cog_c: int
    cog_v: int
    cog_s: int
    cog_cr: int
    pace: str
    structure: str
    tone: str

    def to_dict(self) -> dict:
        # Key order is part of the CHIP input; do not reorder.
        return {
            "element": self.element,
            "modal": {"c": self.modal_c, "f": self.modal_f, "m": self.modal_m},
            "cog": {
                "F": self.cog_f,
                "C": self.cog_c,
                "V": self.cog_v,
                "S": self.cog_s,
                "Cr": self.cog_cr,
            },
            "int": {"PB": self.pace, "SM": self.structure, "TN": self.tone},
        }

    def to_json(self) -> bytes:
        """Compact JSON in fixed field order."""
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_dict(cls, data: dict) -> "NormalizedProfile":
        try:
            modal, cog, inter = data["modal"], data["cog"], data["int"]
            return cls(
                element=str(data["element"]),
                modal_c=int(modal["c"]),
                modal_f=int(modal["f"]),
                modal_m=int(modal["m"]),
                cog_f=int(cog["F"]),
                cog_c=int(cog["C"]),
                cog_v=int(cog["V"]),
                cog_s=int(cog["S"]),
                cog_cr=int(cog["Cr"]),
                pace=str(inter["PB"]),
                structure=str(inter["SM"]),
                tone=str(inter["TN"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"malformed normalized profile: {e}", field="profile") from e


def normalize_profile(profile: InputProfile) -> NormalizedProfile:
    """Convert an InputProfile into its normalized, hashable form."""
    modal, cog, inter = profile.modal, profile.cognition, profile.interaction
    return NormalizedProfile(
        element=element_letter(profile.dominant_element),
        modal_c=clamp_and_round(modal.cardinal),
        modal_f=clamp_and_round(modal.fixed),
        modal_m=clamp_and_round(modal.mutable),
        cog_f=clamp_and_round(cog.fluid),
        cog_c=clamp_and_round(cog.crystallized),
        cog_v=clamp_and_round(cog.verbal),
        cog_s=clamp_and_round(cog.strategic),
        cog_cr=clamp_and_round(cog.creative),
        pace=pace_letter(inter.pace),
        structure=structure_letter(inter.structure),
        tone=tone_letter(inter.tone),
    )


def apply_interaction_defaults(profile: InputProfile) -> InputProfile:
    """Return a copy with empty pace/structure/tone replaced by their defaults."""
    inter = profile.interaction
    filled = replace(
        inter,
        pace=inter.pace or config.DEFAULT_PACE,
        structure=inter.structure or config.DEFAULT_STRUCTURE,
        tone=inter.tone or config.DEFAULT_TONE,
    )
    if filled == inter:
        return profile
    return replace(profile, interaction=filled)


def _check_ratio(path: str, value: float):
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{path} must be between 0 and 1, got {value:f}", field=path)


def _check_choice(path: str, value: str, allowed: tuple):
    if value not in allowed:
        raise ValidationError(f"invalid {path}: {value}", field=path)


def validate_profile(profile: InputProfile):
    """
    Strict validation of an input profile.

    Empty interaction fields are accepted (they take their defaults); anything
    else outside the enumerations, any ratio outside [0, 1], and out-of-range
    birth info raise ValidationError.
    """
    _check_choice("dominantElement", profile.dominant_element, config.ELEMENTS)

    modal = profile.modal
    _check_ratio("modal.cardinal", modal.cardinal)
    _check_ratio("modal.fixed", modal.fixed)
    _check_ratio("modal.mutable", modal.mutable)

    cog = profile.cognition
    _check_ratio("cognition.fluid", cog.fluid)
    _check_ratio("cognition.crystallized", cog.crystallized)
    _check_ratio("cognition.verbal", cog.verbal)
    _check_ratio("cognition.strategic", cog.strategic)
    _check_ratio("cognition.creative", cog.creative)

    inter = apply_interaction_defaults(profile).interaction
    _check_choice("interaction.pace", inter.pace, config.PACES)
    _check_choice("interaction.structure", inter.structure, config.STRUCTURES)
    _check_choice("interaction.tone", inter.tone, config.TONES)

    if profile.birth_info is not None:
        validate_birth_info(profile.birth_info)
