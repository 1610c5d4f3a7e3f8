"""Root conftest — shared fixtures for HCS tests."""

import os

import pytest

# Tests never read a real key from the environment or a .env file
os.environ.setdefault("HCS_SECRET_KEY", "0f" * 32)

from hcs.bazi import compute_chinese_profile  # noqa: E402
from hcs.fusion import WesternProfile  # noqa: E402
from hcs.generator import Generator  # noqa: E402
from hcs.model import (  # noqa: E402
    BirthInfo,
    CognitionProfile,
    InputProfile,
    InteractionPreferences,
    ModalBalance,
)


@pytest.fixture
def salt():
    return bytes(range(32))


@pytest.fixture
def secret():
    return bytes.fromhex("a1" * 32)


@pytest.fixture
def generator(salt, secret):
    return Generator(salt, secret)


@pytest.fixture
def air_profile():
    """The reference Air profile (no birth info)."""
    return InputProfile(
        dominant_element="Air",
        modal=ModalBalance(cardinal=0.31, fixed=0.23, mutable=0.46),
        cognition=CognitionProfile(
            fluid=0.52, crystallized=0.13, verbal=0.53, strategic=0.15, creative=0.33,
        ),
        interaction=InteractionPreferences(pace="balanced", structure="medium", tone="precise"),
    )


@pytest.fixture
def jiazi_birth():
    """1984-01-01 00:00 UTC: Jia-Zi / Yi-Yin / Jia-Shen / Jia-Zi."""
    return BirthInfo(year=1984, month=1, day=1, hour=0, minute=0, timezone="UTC")


@pytest.fixture
def fire_profile(jiazi_birth):
    return InputProfile(
        dominant_element="Fire",
        modal=ModalBalance(cardinal=0.5, fixed=0.3, mutable=0.2),
        cognition=CognitionProfile(
            fluid=0.7, crystallized=0.6, verbal=0.5, strategic=0.8, creative=0.9,
        ),
        interaction=InteractionPreferences(pace="fast", structure="high", tone="sharp"),
        birth_info=jiazi_birth,
    )


@pytest.fixture
def jiazi_chinese(jiazi_birth):
    return compute_chinese_profile(jiazi_birth)


@pytest.fixture
def fire_western(fire_profile):
    return WesternProfile.from_input(fire_profile)
