"""
BaZi Engine — Four Pillars computed from a birth timestamp.

Outputs:
  - Year / Month / Day / Hour pillars (stem + branch)
  - Five-element balance (stems weigh 1.0, branches 0.5)
  - Yin/Yang balance (0 = pure Yin, 1 = pure Yang)
  - Day Master and its strength

The calendar math is a deterministic approximation: the month pillar uses a
fixed solar-month table rather than solar-term boundaries, and the day pillar
counts days from a fixed anchor. Same input, same pillars, on every run.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from dateutil import tz
from loguru import logger

import config
from hcs.errors import ValidationError
from hcs.model import BirthInfo

STEM_NAMES = [s[0] for s in config.HEAVENLY_STEMS]


@dataclass(frozen=True)
class Pillar:
    stem: str
    branch: str
    stem_index: int
    branch_index: int

    @classmethod
    def from_indices(cls, stem_index: int, branch_index: int) -> "Pillar":
        return cls(
            stem=config.HEAVENLY_STEMS[stem_index][0],
            branch=config.EARTHLY_BRANCHES[branch_index][0],
            stem_index=stem_index,
            branch_index=branch_index,
        )

    @property
    def stem_element(self) -> str:
        return config.HEAVENLY_STEMS[self.stem_index][1]

    @property
    def branch_element(self) -> str:
        return config.EARTHLY_BRANCHES[self.branch_index][1]

    @property
    def stem_polarity(self) -> str:
        return config.HEAVENLY_STEMS[self.stem_index][2]

    @property
    def branch_polarity(self) -> str:
        return config.EARTHLY_BRANCHES[self.branch_index][2]

    def __str__(self) -> str:
        return f"{self.stem}-{self.branch}"


# ── Pillars ───────────────────────────────────────────────────────────────────

def compute_year_pillar(year: int) -> Pillar:
    """
    Year pillar from the 60-year cycle anchored on 1924 (Jia-Zi).

    Example: 1984 → Jia-Zi, 1990 → Geng-Wu
    """
    offset = year - config.YEAR_CYCLE_EPOCH
    # Python's % is already non-negative for a positive modulus.
    return Pillar.from_indices(offset % 10, offset % 12)


def compute_month_pillar(year: int, month: int) -> Pillar:
    """Month branch from the solar-month table; stem = (year stem × 2 + month) mod 10."""
    year_pillar = compute_year_pillar(year)
    branch_index = config.MONTH_BRANCH_MAPPING[month - 1]
    stem_index = (year_pillar.stem_index * 2 + month) % 10
    return Pillar.from_indices(stem_index, branch_index)


def compute_day_pillar(year: int, month: int, day: int) -> Pillar:
    """
    Day pillar from the number of days elapsed since the 1900-01-01 anchor.

    Repeats every 60 days regardless of month or year boundaries.
    """
    days = (date(year, month, day) - date(*config.DAY_CYCLE_EPOCH)).days
    return Pillar.from_indices(days % 10, days % 12)


def compute_hour_pillar(day_pillar: Pillar, hour: int) -> Pillar:
    """
    Hour pillar in two-hour windows.

    23:00–00:59 → Zi (0), 01:00–02:59 → Chou (1), ...
    Stem base depends on the day stem: (day stem mod 5) × 2.
    """
    branch_index = ((hour + 1) // 2) % 12
    stem_index = ((day_pillar.stem_index % 5) * 2 + branch_index) % 10
    return Pillar.from_indices(stem_index, branch_index)


# ── Derived metrics ───────────────────────────────────────────────────────────

def calculate_element_balance(pillars: list[Pillar]) -> dict[str, float]:
    """
    Weighted share of each of the five elements.

    Stem element counts 1.0, branch element 0.5; the result sums to 1.0.
    """
    elements = {name: 0.0 for name in config.CHINESE_ELEMENTS}
    for pillar in pillars:
        elements[pillar.stem_element] += 1.0
        elements[pillar.branch_element] += 0.5

    total = sum(elements.values())
    if total == 0:
        return elements
    return {name: value / total for name, value in elements.items()}


def calculate_yin_yang_balance(pillars: list[Pillar]) -> float:
    """Yang share with stems at weight 1.0 and branches at 0.5 (0 = Yin, 1 = Yang)."""
    yang = 0.0
    total = 0.0
    for pillar in pillars:
        if pillar.stem_polarity == "Yang":
            yang += 1.0
        total += 1.0
        if pillar.branch_polarity == "Yang":
            yang += 0.5
        total += 0.5
    return yang / total if total else 0.0


def get_day_master(day_pillar: Pillar) -> str:
    return day_pillar.stem


def is_generating_element(source: str, target: str) -> bool:
    """True if source feeds target in the generation cycle (Wood → Fire → ...)."""
    return config.GENERATION_CYCLE.get(source) == target


def get_day_master_strength(pillars: list[Pillar], day_pillar: Pillar) -> float:
    """
    Strength of the Day Master, 0 (weak) to 1 (strong).

    Base 0.3; for each of the other pillars:
      +0.15 stem shares the day element      +0.10 branch shares it
      +0.10 stem generates the day element   +0.05 branch generates it
    """
    day_element = day_pillar.stem_element
    strength = 0.3

    for i, pillar in enumerate(pillars):
        if i == 2:
            continue  # the day pillar itself
        stem_element = pillar.stem_element
        branch_element = pillar.branch_element

        if stem_element == day_element:
            strength += 0.15
        if branch_element == day_element:
            strength += 0.1
        if is_generating_element(stem_element, day_element):
            strength += 0.1
        if is_generating_element(branch_element, day_element):
            strength += 0.05

    return min(max(strength, 0.0), 1.0)


def dominant_element(balance: dict[str, float]) -> str:
    """Element with the highest share; ties go to the earliest in CHINESE_ELEMENTS."""
    best, best_value = "", 0.0
    for name in config.CHINESE_ELEMENTS:
        value = balance.get(name, 0.0)
        if value > best_value:
            best, best_value = name, value
    return best


# ── Chinese profile ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChineseProfile:
    year_pillar: str
    month_pillar: str
    day_pillar: str
    hour_pillar: str
    yin_yang_balance: float
    element_balance: dict
    day_master: str
    day_master_strength: float

    def dominant_element(self) -> str:
        return dominant_element(self.element_balance)

    def element_strength(self, element: str) -> float:
        return self.element_balance.get(element, 0.0)

    def yin_yang_type(self) -> str:
        if self.yin_yang_balance > 0.6:
            return "Yang-dominant"
        if self.yin_yang_balance < 0.4:
            return "Yin-dominant"
        return "Balanced"

    def day_master_type(self) -> str:
        if self.day_master_strength > 0.7:
            return "Strong"
        if self.day_master_strength < 0.3:
            return "Weak"
        return "Moderate"

    def day_master_index(self) -> int:
        """Index of the Day Master in the stem table (0 if unknown)."""
        try:
            return STEM_NAMES.index(self.day_master)
        except ValueError:
            return 0

    def to_dict(self) -> dict:
        return {
            "yearPillar": self.year_pillar,
            "monthPillar": self.month_pillar,
            "dayPillar": self.day_pillar,
            "hourPillar": self.hour_pillar,
            "yinYangBalance": self.yin_yang_balance,
            "elementBalance": dict(sorted(self.element_balance.items())),
            "dayMaster": self.day_master,
            "dayMasterStrength": self.day_master_strength,
        }


def validate_birth_info(info: BirthInfo):
    """Range checks only; the day is not checked against the month length."""
    for name, (low, high) in config.BIRTH_RANGES.items():
        value = getattr(info, name)
        if not low <= value <= high:
            raise ValidationError(
                f"{name} must be between {low} and {high}, got {value}",
                field=f"birthInfo.{name}",
            )


def resolve_timezone(name: str):
    """
    tzinfo for an IANA zone name; empty, "UTC" and unresolvable names all
    give UTC.

    Only zoneinfo files are accepted. Absolute paths and ".." segments are
    never looked up.
    """
    if not name or name == "UTC":
        return tz.UTC
    parts = name.replace("\\", "/").split("/")
    if name.startswith(("/", "\\")) or ".." in parts:
        logger.debug(f"Rejected timezone {name!r}, using UTC")
        return tz.UTC
    try:
        zone = tz.gettz(name)
    except (ValueError, OSError) as e:
        logger.debug(f"Unreadable timezone {name!r} ({e}), using UTC")
        return tz.UTC
    # POSIX TZ strings such as "UTC+3" are not zone names
    if not isinstance(zone, (tz.tzfile, tz.tzutc)):
        logger.debug(f"Unknown timezone {name!r}, using UTC")
        return tz.UTC
    return zone


def local_birth_time(info: BirthInfo) -> datetime:
    """
    Local wall-clock birth time in the birth timezone.

    A day past the end of the month rolls into the next month
    (31 February → 3 March in a common year). The UTC offset is the one in
    effect at the wall time shifted by the zone's offset at the wall time
    read as UTC. For a wall time skipped by a DST transition that moves it
    back by the gap in zones west of UTC and forward in zones east of it.
    """
    zone = resolve_timezone(info.timezone)
    wall = datetime(info.year, info.month, 1, info.hour, info.minute, tzinfo=tz.UTC)
    wall += timedelta(days=info.day - 1)
    guess = wall.astimezone(zone).utcoffset()
    offset = (wall - guess).astimezone(zone).utcoffset()
    return (wall - offset).astimezone(zone)


def compute_chinese_profile(info: BirthInfo) -> ChineseProfile:
    """
    Full Chinese profile for one birth timestamp.

    Raises ValidationError for out-of-range birth components.
    """
    validate_birth_info(info)
    local = local_birth_time(info)

    year_pillar = compute_year_pillar(local.year)
    month_pillar = compute_month_pillar(local.year, local.month)
    day_pillar = compute_day_pillar(local.year, local.month, local.day)
    hour_pillar = compute_hour_pillar(day_pillar, local.hour)
    pillars = [year_pillar, month_pillar, day_pillar, hour_pillar]

    profile = ChineseProfile(
        year_pillar=str(year_pillar),
        month_pillar=str(month_pillar),
        day_pillar=str(day_pillar),
        hour_pillar=str(hour_pillar),
        yin_yang_balance=calculate_yin_yang_balance(pillars),
        element_balance=calculate_element_balance(pillars),
        day_master=get_day_master(day_pillar),
        day_master_strength=get_day_master_strength(pillars, day_pillar),
    )
    logger.debug(
        f"BaZi {profile.year_pillar} | {profile.month_pillar} | "
        f"{profile.day_pillar} | {profile.hour_pillar} — DM {profile.day_master}"
    )
    return profile

