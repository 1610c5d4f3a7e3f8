"""
Input and output records for HCS generation.

Input records are frozen: a profile is owned by the caller for the duration
of one generation call and nothing downstream mutates it. JSON keys follow
the public wire shape (camelCase), Python attributes are snake_case.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from hcs.errors import ValidationError

if TYPE_CHECKING:
    from hcs.bazi import ChineseProfile
    from hcs.fusion import CombinedProfile


def _ratio(data: dict, key: str, path: str) -> float:
    value = data.get(key, 0.0)
    if isinstance(value, bool):
        raise ValidationError(f"{path} must be a number, got {value!r}", field=path)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{path} must be a number, got {value!r}", field=path) from None


def _integer(data: dict, key: str, path: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{path} must be an integer, got {value!r}", field=path)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{path} must be an integer, got {value!r}", field=path) from None


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValidationError(f"{key} must be an object", field=key)
    return value


@dataclass(frozen=True)
class ModalBalance:
    cardinal: float = 0.0
    fixed: float = 0.0
    mutable: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "ModalBalance":
        return cls(
            cardinal=_ratio(data, "cardinal", "modal.cardinal"),
            fixed=_ratio(data, "fixed", "modal.fixed"),
            mutable=_ratio(data, "mutable", "modal.mutable"),
        )

    def to_dict(self) -> dict:
        return {"cardinal": self.cardinal, "fixed": self.fixed, "mutable": self.mutable}


@dataclass(frozen=True)
class CognitionProfile:
    fluid: float = 0.0
    crystallized: float = 0.0
    verbal: float = 0.0
    strategic: float = 0.0
    creative: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "CognitionProfile":
        return cls(
            fluid=_ratio(data, "fluid", "cognition.fluid"),
            crystallized=_ratio(data, "crystallized", "cognition.crystallized"),
            verbal=_ratio(data, "verbal", "cognition.verbal"),
            strategic=_ratio(data, "strategic", "cognition.strategic"),
            creative=_ratio(data, "creative", "cognition.creative"),
        )

    def to_dict(self) -> dict:
        return {
            "fluid": self.fluid,
            "crystallized": self.crystallized,
            "verbal": self.verbal,
            "strategic": self.strategic,
            "creative": self.creative,
        }


@dataclass(frozen=True)
class InteractionPreferences:
    pace: str = ""        # balanced | fast | slow
    structure: str = ""   # low | medium | high
    tone: str = ""        # warm | neutral | sharp | precise

    @classmethod
    def from_dict(cls, data: dict) -> "InteractionPreferences":
        return cls(
            pace=_text(data, "pace"),
            structure=_text(data, "structure"),
            tone=_text(data, "tone"),
        )

    def to_dict(self) -> dict:
        return {"pace": self.pace, "structure": self.structure, "tone": self.tone}


@dataclass(frozen=True)
class BirthInfo:
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    timezone: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "BirthInfo":
        return cls(
            year=_integer(data, "year", "birthInfo.year"),
            month=_integer(data, "month", "birthInfo.month"),
            day=_integer(data, "day", "birthInfo.day"),
            hour=_integer(data, "hour", "birthInfo.hour"),
            minute=_integer(data, "minute", "birthInfo.minute"),
            timezone=_text(data, "timezone"),
        )

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class InputProfile:
    dominant_element: str                      # Earth | Air | Water | Fire
    modal: ModalBalance = field(default_factory=ModalBalance)
    cognition: CognitionProfile = field(default_factory=CognitionProfile)
    interaction: InteractionPreferences = field(default_factory=InteractionPreferences)
    birth_info: Optional[BirthInfo] = None

    @classmethod
    def from_dict(cls, data: dict) -> "InputProfile":
        """Build a profile from its JSON shape (dominantElement, modal, cognition, ...)."""
        if not isinstance(data, dict):
            raise ValidationError("input profile must be a JSON object")
        birth = data.get("birthInfo")
        if birth is not None and not isinstance(birth, dict):
            raise ValidationError("birthInfo must be an object", field="birthInfo")
        return cls(
            dominant_element=_text(data, "dominantElement"),
            modal=ModalBalance.from_dict(_section(data, "modal")),
            cognition=CognitionProfile.from_dict(_section(data, "cognition")),
            interaction=InteractionPreferences.from_dict(_section(data, "interaction")),
            birth_info=BirthInfo.from_dict(birth) if birth is not None else None,
        )

    def to_dict(self) -> dict:
        out = {
            "dominantElement": self.dominant_element,
            "modal": self.modal.to_dict(),
            "cognition": self.cognition.to_dict(),
            "interaction": self.interaction.to_dict(),
        }
        if self.birth_info is not None:
            out["birthInfo"] = self.birth_info.to_dict()
        return out


@dataclass
class Output:
    """
    Result of one generation call.

    Filled in incrementally by the generator as each codec completes; optional
    members stay None (and are left out of to_dict) when their codec did not run.
    """
    input: InputProfile
    chip: str
    code_u3: str = ""
    code_u4: Optional[str] = None
    code_u5: Optional[str] = None
    code_u7: Optional[str] = None
    qsig: Optional[str] = None
    b3sig: Optional[str] = None
    chinese_profile: Optional["ChineseProfile"] = None
    combined_profile: Optional["CombinedProfile"] = None

    def codes(self) -> list[str]:
        """Non-empty U3/U4/U5 codes in order, one per line of a .hcs file."""
        return [c for c in (self.code_u3, self.code_u4, self.code_u5) if c]

    def to_dict(self) -> dict:
        out = {"input": self.input.to_dict(), "codeU3": self.code_u3}
        if self.code_u4:
            out["codeU4"] = self.code_u4
        if self.code_u5:
            out["codeU5"] = self.code_u5
        if self.code_u7:
            out["codeU7"] = self.code_u7
        if self.qsig:
            out["qsig"] = self.qsig
        if self.b3sig:
            out["b3sig"] = self.b3sig
        out["chip"] = self.chip
        if self.chinese_profile is not None:
            out["chineseProfile"] = self.chinese_profile.to_dict()
        if self.combined_profile is not None:
            out["combinedProfile"] = self.combined_profile.to_dict()
        return out
