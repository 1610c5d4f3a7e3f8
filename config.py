"""
Central configuration for HCS Lab.
Lookup tables and tunable settings live here. Loaded from environment where applicable.
"""
import os
from functools import lru_cache

from dotenv import load_dotenv

from hcs.errors import ConfigurationError

load_dotenv()

VERSION = "1.0.0-hcs-lab"

# ── Secrets & salt ────────────────────────────────────────────────────────────
# HCS_SECRET_KEY is a hex string decoding to 32 or 64 raw bytes. It signs U7
# codes and is never written to logs or echoed back to the caller.
#
# Generate one with:
#   python -c "import secrets; print(secrets.token_hex(32))"
SECRET_KEY_ENV = "HCS_SECRET_KEY"
SECRET_KEY_LENGTHS = (32, 64)

SALT_DIR = os.getenv("HCS_SALT_DIR", ".")
SALT_FILE_NAME = ".hcs_salt"
SALT_SIZE = 32

# ── Western enumerations ──────────────────────────────────────────────────────
# First entry of ELEMENTS is the fallback when the element is unknown.
ELEMENTS = ("Earth", "Air", "Water", "Fire")
PACES = ("balanced", "fast", "slow")
STRUCTURES = ("low", "medium", "high")
TONES = ("warm", "neutral", "sharp", "precise")

DEFAULT_PACE = "balanced"
DEFAULT_STRUCTURE = "medium"
DEFAULT_TONE = "neutral"

# ── Heavenly Stems ────────────────────────────────────────────────────────────
# (name, element, polarity)
HEAVENLY_STEMS = [
    ("Jia",  "Wood",  "Yang"),
    ("Yi",   "Wood",  "Yin"),
    ("Bing", "Fire",  "Yang"),
    ("Ding", "Fire",  "Yin"),
    ("Wu",   "Earth", "Yang"),
    ("Ji",   "Earth", "Yin"),
    ("Geng", "Metal", "Yang"),
    ("Xin",  "Metal", "Yin"),
    ("Ren",  "Water", "Yang"),
    ("Gui",  "Water", "Yin"),
]

# ── Earthly Branches ──────────────────────────────────────────────────────────
# (name, element, polarity, animal)
EARTHLY_BRANCHES = [
    ("Zi",   "Water", "Yang", "Rat"),
    ("Chou", "Earth", "Yin",  "Ox"),
    ("Yin",  "Wood",  "Yang", "Tiger"),
    ("Mao",  "Wood",  "Yin",  "Rabbit"),
    ("Chen", "Earth", "Yang", "Dragon"),
    ("Si",   "Fire",  "Yin",  "Snake"),
    ("Wu",   "Fire",  "Yang", "Horse"),
    ("Wei",  "Earth", "Yin",  "Goat"),
    ("Shen", "Metal", "Yang", "Monkey"),
    ("You",  "Metal", "Yin",  "Rooster"),
    ("Xu",   "Earth", "Yang", "Dog"),
    ("Hai",  "Water", "Yin",  "Pig"),
]

# Five elements in their fixed scan order. Ties for "dominant element" are
# resolved in favour of the earliest entry.
CHINESE_ELEMENTS = ("Wood", "Fire", "Earth", "Metal", "Water")

# Solar-month approximation, January first. Not a solar-term boundary table.
MONTH_BRANCH_MAPPING = [2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 1]

# 1924 is a Jia-Zi year, 1900-01-01 anchors the 60-day cycle.
YEAR_CYCLE_EPOCH = 1924
DAY_CYCLE_EPOCH = (1900, 1, 1)

# Generation cycle: each element feeds the next.
GENERATION_CYCLE = {
    "Wood":  "Fire",
    "Fire":  "Earth",
    "Earth": "Metal",
    "Metal": "Water",
    "Water": "Wood",
}

# Accepted birth-info ranges (inclusive). Day is not calendar-aware.
BIRTH_RANGES = {
    "year":   (1900, 2100),
    "month":  (1, 12),
    "day":    (1, 31),
    "hour":   (0, 23),
    "minute": (0, 59),
}

# ── Fusion tables ─────────────────────────────────────────────────────────────
WESTERN_WEIGHT = 0.4
CHINESE_WEIGHT = 0.6

PACE_BASE = {"slow": 0.2, "balanced": 0.5, "fast": 0.8}

ELEMENT_COMPATIBILITY = {
    "Fire":  {"Fire", "Wood"},
    "Earth": {"Earth", "Fire", "Metal"},
    "Air":   {"Wood", "Metal"},
    "Water": {"Water", "Wood"},
}

FUSION_ELEMENT_CODES = {
    "Fire-Fire":  "A", "Fire-Wood":  "B", "Fire-Earth":  "C", "Fire-Metal":  "D", "Fire-Water":  "E",
    "Earth-Fire": "F", "Earth-Wood": "G", "Earth-Earth": "H", "Earth-Metal": "I", "Earth-Water": "J",
    "Air-Fire":   "K", "Air-Wood":   "L", "Air-Earth":   "M", "Air-Metal":   "N", "Air-Water":   "O",
    "Water-Fire": "P", "Water-Wood": "Q", "Water-Earth": "R", "Water-Metal": "S", "Water-Water": "T",
}
FUSION_ELEMENT_DEFAULT = "X"

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("HCS_LOG_DIR", "logs")


@lru_cache(maxsize=None)
def load_secret_key() -> bytes:
    """
    Decode HCS_SECRET_KEY once per process.

    Raises ConfigurationError when the variable is missing, is not valid hex,
    or does not decode to 32 or 64 bytes. Failed loads are not cached, so a
    corrected environment is picked up on the next call.
    """
    value = os.getenv(SECRET_KEY_ENV, "")
    if not value:
        raise ConfigurationError(f"{SECRET_KEY_ENV} is not set")
    try:
        decoded = bytes.fromhex(value)
    except ValueError as e:
        raise ConfigurationError(f"invalid {SECRET_KEY_ENV} hex encoding: {e}") from e
    if len(decoded) not in SECRET_KEY_LENGTHS:
        raise ConfigurationError(
            f"{SECRET_KEY_ENV} must be 32 or 64 bytes, got {len(decoded)} bytes"
        )
    return decoded
