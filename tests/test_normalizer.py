"""Normalizer tests — percentage rounding, letter maps and strict validation.

Tests cover:
    - clamp_and_round: half away from zero, clamping at both ends
    - normalize_profile: letters and percentages, lenient defaults
    - NormalizedProfile.to_json: fixed key order, compact separators
    - apply_interaction_defaults / validate_profile
"""

import dataclasses

import pytest

from hcs.errors import ValidationError
from hcs.model import BirthInfo, InputProfile, InteractionPreferences, ModalBalance
from hcs.normalizer import (
    apply_interaction_defaults,
    clamp_and_round,
    NormalizedProfile,
    normalize_profile,
    validate_profile,
)


# ─── clamp_and_round ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("value, expected", [
    (0.314, 31),
    (0.315, 32),
    (0.5, 50),
    (1.0, 100),
    (0.0, 0),
    (-0.5, 0),
    (1.7, 100),
    (0.005, 1),
])
def test_clamp_and_round(value, expected):
    assert clamp_and_round(value) == expected


def test_clamp_and_round_always_in_percentage_range():
    for value in (-1e9, -1.0, -0.0001, 0.0, 0.4999, 0.999, 1.0, 1.0001, 42.0):
        assert 0 <= clamp_and_round(value) <= 100


# ─── normalize_profile ────────────────────────────────────────────────────────

def test_normalize_reference_profile(air_profile):
    n = normalize_profile(air_profile)
    assert n.element == "A"
    assert (n.modal_c, n.modal_f, n.modal_m) == (31, 23, 46)
    assert (n.cog_f, n.cog_c, n.cog_v, n.cog_s, n.cog_cr) == (52, 13, 53, 15, 33)
    assert (n.pace, n.structure, n.tone) == ("B", "M", "P")


def test_normalize_unknown_values_fall_back_to_defaults():
    profile = InputProfile(
        dominant_element="Aether",
        interaction=InteractionPreferences(pace="glacial", structure="", tone="loud"),
    )
    n = normalize_profile(profile)
    assert (n.element, n.pace, n.structure, n.tone) == ("E", "B", "M", "N")


def test_normalized_json_field_order(air_profile):
    raw = normalize_profile(air_profile).to_json()
    assert raw == (
        b'{"element":"A","modal":{"c":31,"f":23,"m":46},'
        b'"cog":{"F":52,"C":13,"V":53,"S":15,"Cr":33},'
        b'"int":{"PB":"B","SM":"M","TN":"P"}}'
    )


def test_normalized_from_dict_round_trip(air_profile):
    n = normalize_profile(air_profile)
    assert NormalizedProfile.from_dict(n.to_dict()) == n


def test_normalized_from_dict_rejects_missing_section():
    with pytest.raises(ValidationError):
        NormalizedProfile.from_dict({"element": "A", "modal": {"c": 1, "f": 2, "m": 3}})


# ─── Interaction defaults ─────────────────────────────────────────────────────

def test_apply_interaction_defaults_fills_empty_fields():
    profile = InputProfile(dominant_element="Water")
    filled = apply_interaction_defaults(profile).interaction
    assert (filled.pace, filled.structure, filled.tone) == ("balanced", "medium", "neutral")
    # input is left untouched
    assert profile.interaction.pace == ""


def test_apply_interaction_defaults_keeps_explicit_values(air_profile):
    assert apply_interaction_defaults(air_profile) is air_profile


# ─── validate_profile ─────────────────────────────────────────────────────────

def test_validate_accepts_reference_profile(air_profile):
    validate_profile(air_profile)


def test_validate_accepts_empty_interaction():
    validate_profile(InputProfile(dominant_element="Earth"))


def test_validate_rejects_unknown_element(air_profile):
    with pytest.raises(ValidationError) as exc:
        validate_profile(dataclasses.replace(air_profile, dominant_element="Aether"))
    assert exc.value.field == "dominantElement"


def test_validate_rejects_ratio_out_of_range(air_profile):
    bad = dataclasses.replace(air_profile, modal=ModalBalance(cardinal=1.2, fixed=0.1, mutable=0.1))
    with pytest.raises(ValidationError) as exc:
        validate_profile(bad)
    assert exc.value.field == "modal.cardinal"
    assert "between 0 and 1" in exc.value.message


def test_validate_rejects_unknown_tone(air_profile):
    bad = dataclasses.replace(
        air_profile,
        interaction=InteractionPreferences(pace="fast", structure="low", tone="shouty"),
    )
    with pytest.raises(ValidationError) as exc:
        validate_profile(bad)
    assert exc.value.field == "interaction.tone"


def test_validate_rejects_birth_info_out_of_range(air_profile):
    bad = dataclasses.replace(air_profile, birth_info=BirthInfo(year=1850, month=1, day=1))
    with pytest.raises(ValidationError) as exc:
        validate_profile(bad)
    assert exc.value.field == "birthInfo.year"
