"""
Fusion Engine — blends the Western profile with the Chinese BaZi profile.

Combines:
  1. Element signature (Western dominant element 40% + Chinese balance 60%)
  2. Cognitive fusion (each Western cognition ratio + one or two elements)
  3. Tempo signals (pace, variability, intensity, rhythm)
  4. Unified balance and harmonic resonance
  5. A 2-character fusion ID

Every function here is pure: same profiles in, same fusion out.
"""
import math
from dataclasses import dataclass, field

from loguru import logger

import config
from hcs.bazi import ChineseProfile
from hcs.model import CognitionProfile, InputProfile, InteractionPreferences, ModalBalance
from hcs.normalizer import apply_interaction_defaults, clamp


@dataclass(frozen=True)
class WesternProfile:
    dominant_element: str
    modal: ModalBalance
    cognition: CognitionProfile
    interaction: InteractionPreferences

    @classmethod
    def from_input(cls, profile: InputProfile) -> "WesternProfile":
        """Western half of an input profile, with interaction defaults filled in."""
        profile = apply_interaction_defaults(profile)
        return cls(
            dominant_element=profile.dominant_element,
            modal=profile.modal,
            cognition=profile.cognition,
            interaction=profile.interaction,
        )

    def to_dict(self) -> dict:
        return {
            "dominantElement": self.dominant_element,
            "modal": self.modal.to_dict(),
            "cognition": self.cognition.to_dict(),
            "interaction": self.interaction.to_dict(),
        }


@dataclass(frozen=True)
class CognitiveFusion:
    analytical: float   # strategic + Metal/Water
    creative: float     # creative + Fire/Wood
    grounded: float     # crystallized + Earth
    adaptive: float     # fluid + element variability
    expressive: float   # verbal + Yang

    def traits(self) -> list[float]:
        """Trait values in pattern order (analytical=0 ... expressive=4)."""
        return [self.analytical, self.creative, self.grounded, self.adaptive, self.expressive]

    def to_dict(self) -> dict:
        return {
            "analytical": self.analytical,
            "creative": self.creative,
            "grounded": self.grounded,
            "adaptive": self.adaptive,
            "expressive": self.expressive,
        }


@dataclass(frozen=True)
class TempoSignals:
    pace: float          # 0 slow, 0.5 balanced, 1 fast
    variability: float   # 0 consistent, 1 highly variable
    intensity: float     # 0 gentle, 1 intense
    rhythm: str          # steady | dynamic | fluctuating

    def to_dict(self) -> dict:
        return {
            "pace": self.pace,
            "variability": self.variability,
            "intensity": self.intensity,
            "rhythm": self.rhythm,
        }


@dataclass(frozen=True)
class FusionProfile:
    element_signature: dict
    cognitive_fusion: CognitiveFusion
    tempo_signals: TempoSignals
    unified_balance: float
    harmonic_resonance: float
    fusion_id: str = field(metadata={"label": "FusionID"})

    def to_dict(self) -> dict:
        return {
            "elementSignature": dict(sorted(self.element_signature.items())),
            "cognitiveFusion": self.cognitive_fusion.to_dict(),
            "tempoSignals": self.tempo_signals.to_dict(),
            "unifiedBalance": self.unified_balance,
            "harmonicResonance": self.harmonic_resonance,
            "fusionId": self.fusion_id,
        }


@dataclass(frozen=True)
class CombinedProfile:
    western: WesternProfile
    chinese: ChineseProfile
    fusion: FusionProfile

    def to_dict(self) -> dict:
        return {
            "western": self.western.to_dict(),
            "chinese": self.chinese.to_dict(),
            "fusion": self.fusion.to_dict(),
        }


# ── Dispersion helpers ────────────────────────────────────────────────────────

def calculate_element_variability(elements: dict[str, float]) -> float:
    """
    Spread of the five-element balance around the uniform mean 0.2.

    Standard deviation scaled by 4 and capped at 1.
    """
    mean = 0.2
    variance = 0.0
    for value in elements.values():
        diff = value - mean
        variance += diff * diff
    return min(math.sqrt(variance / 5) * 4, 1.0)


def calculate_modal_variability(modal: ModalBalance) -> float:
    """Inverted spread of the three modalities: evenly spread → close to 1."""
    mean = 1.0 / 3.0
    variance = 0.0
    for value in (modal.cardinal, modal.fixed, modal.mutable):
        diff = value - mean
        variance += diff * diff
    return 1.0 - min(math.sqrt(variance / 3) * 3, 1.0)


# ── Fusion components ─────────────────────────────────────────────────────────

def build_element_signature(western: WesternProfile, chinese: ChineseProfile) -> dict[str, float]:
    signature: dict[str, float] = {}

    w = config.WESTERN_WEIGHT
    element = western.dominant_element
    if element == "Air":
        # Air splits evenly into Wood and Metal
        signature["Wood"] = signature.get("Wood", 0.0) + w * 0.5
        signature["Metal"] = signature.get("Metal", 0.0) + w * 0.5
    elif element in ("Earth", "Water", "Fire"):
        signature[element] = signature.get(element, 0.0) + w

    for name, balance in chinese.element_balance.items():
        signature[name] = signature.get(name, 0.0) + balance * config.CHINESE_WEIGHT

    ordered = {name: signature[name] for name in config.CHINESE_ELEMENTS if name in signature}
    ordered.update((k, v) for k, v in signature.items() if k not in ordered)

    total = sum(ordered.values())
    if total > 0:
        return {name: value / total for name, value in ordered.items()}
    return ordered


def build_cognitive_fusion(western: WesternProfile, chinese: ChineseProfile) -> CognitiveFusion:
    balance = chinese.element_balance
    metal = balance.get("Metal", 0.0)
    water = balance.get("Water", 0.0)
    fire = balance.get("Fire", 0.0)
    wood = balance.get("Wood", 0.0)
    earth = balance.get("Earth", 0.0)
    cog = western.cognition

    analytical = cog.strategic * 0.5 + (metal * 0.3 + water * 0.2)
    creative = cog.creative * 0.5 + (fire * 0.3 + wood * 0.2)
    grounded = cog.crystallized * 0.5 + earth * 0.5
    adaptive = cog.fluid * 0.6 + calculate_element_variability(balance) * 0.4
    expressive = cog.verbal * 0.5 + chinese.yin_yang_balance * 0.5

    return CognitiveFusion(
        analytical=clamp(analytical),
        creative=clamp(creative),
        grounded=clamp(grounded),
        adaptive=clamp(adaptive),
        expressive=clamp(expressive),
    )


def build_tempo_signals(western: WesternProfile, chinese: ChineseProfile) -> TempoSignals:
    base_pace = config.PACE_BASE.get(western.interaction.pace, config.PACE_BASE["balanced"])
    # Yang speeds up, Yin slows down
    pace = base_pace * 0.6 + chinese.yin_yang_balance * 0.4

    modal_variability = calculate_modal_variability(western.modal)
    element_variability = calculate_element_variability(chinese.element_balance)
    variability = (modal_variability + element_variability) / 2

    fire_water = chinese.element_strength("Fire") + chinese.element_strength("Water")
    intensity = fire_water * 0.5 + chinese.day_master_strength * 0.5

    if variability > 0.6:
        rhythm = "fluctuating"
    elif intensity > 0.6 and pace > 0.6:
        rhythm = "dynamic"
    else:
        rhythm = "steady"

    return TempoSignals(
        pace=clamp(pace),
        variability=clamp(variability),
        intensity=clamp(intensity),
        rhythm=rhythm,
    )


def calculate_unified_balance(western: WesternProfile, chinese: ChineseProfile) -> float:
    modal = western.modal
    modal_balance = modal.cardinal * 0.5 + modal.mutable * 0.3 + (1 - modal.fixed) * 0.2
    return clamp(modal_balance * 0.4 + chinese.yin_yang_balance * 0.6)


def are_elements_compatible(western_element: str, chinese_element: str) -> bool:
    return chinese_element in config.ELEMENT_COMPATIBILITY.get(western_element, ())


def calculate_harmonic_resonance(western: WesternProfile, chinese: ChineseProfile) -> float:
    """
    How well the two systems agree, 0–1.

    Base 0.5, +0.2 compatible elements, +0.15 pace matches Yin/Yang,
    +0.15 structure matches Earth+Metal stability.
    """
    resonance = 0.5

    if are_elements_compatible(western.dominant_element, chinese.dominant_element()):
        resonance += 0.2

    pace = western.interaction.pace
    yy = chinese.yin_yang_balance
    if pace == "fast" and yy > 0.6:
        resonance += 0.15
    elif pace == "slow" and yy < 0.4:
        resonance += 0.15
    elif pace == "balanced" and 0.4 <= yy <= 0.6:
        resonance += 0.15

    structure = western.interaction.structure
    earth_metal = chinese.element_strength("Earth") + chinese.element_strength("Metal")
    if structure == "high" and earth_metal > 0.4:
        resonance += 0.15
    elif structure == "low" and earth_metal < 0.3:
        resonance += 0.15

    return clamp(resonance)


def element_code(western_element: str, chinese_element: str) -> str:
    key = f"{western_element}-{chinese_element}"
    return config.FUSION_ELEMENT_CODES.get(key, config.FUSION_ELEMENT_DEFAULT)


def balance_code(modal: ModalBalance, yin_yang: float) -> str:
    """
    One digit from a 3×3 grid.

    Rows: cardinal > 0.4 → 2, else fixed > 0.4 → 1, else 0.
    Columns: Yin/Yang > 0.66 → 2, > 0.33 → 1, else 0.
    """
    if modal.cardinal > 0.4:
        modal_zone = 2
    elif modal.fixed > 0.4:
        modal_zone = 1
    else:
        modal_zone = 0

    if yin_yang > 0.66:
        yy_zone = 2
    elif yin_yang > 0.33:
        yy_zone = 1
    else:
        yy_zone = 0

    return str(modal_zone * 3 + yy_zone + 1)


def generate_fusion_id(western: WesternProfile, chinese: ChineseProfile) -> str:
    first = element_code(western.dominant_element, chinese.dominant_element())
    return first + balance_code(western.modal, chinese.yin_yang_balance)


def build_fusion_profile(western: WesternProfile, chinese: ChineseProfile) -> FusionProfile:
    fusion = FusionProfile(
        element_signature=build_element_signature(western, chinese),
        cognitive_fusion=build_cognitive_fusion(western, chinese),
        tempo_signals=build_tempo_signals(western, chinese),
        unified_balance=calculate_unified_balance(western, chinese),
        harmonic_resonance=calculate_harmonic_resonance(western, chinese),
        fusion_id=generate_fusion_id(western, chinese),
    )
    logger.debug(
        f"Fusion {fusion.fusion_id} | balance {fusion.unified_balance:.4f} | "
        f"resonance {fusion.harmonic_resonance:.4f} | rhythm {fusion.tempo_signals.rhythm}"
    )
    return fusion
