"""U3 codec tests — encoding, strict validation and parsing.

Tests cover:
    - Reference encoding
    - Three-digit fields for full ratios
    - Validator rejects malformed codes
    - parse_u3 named groups
"""

import dataclasses

import pytest

from hcs.codec_u3 import encode_u3, parse_u3, validate_u3_format
from hcs.errors import ValidationError
from hcs.model import CognitionProfile, ModalBalance

REFERENCE = "HCS-U3|E:A|MOD:c31f23m46|COG:F52C13V53S15Cr33|INT:PB=B,SM=M,TN=P|CHIP:b04edb83f10e"


# ─── Encoding ─────────────────────────────────────────────────────────────────

def test_encode_reference(air_profile):
    assert encode_u3(air_profile, "b04edb83f10e") == REFERENCE


def test_encode_full_ratio_prints_three_digits(air_profile):
    profile = dataclasses.replace(air_profile, modal=ModalBalance(1.0, 0.0, 0.0))
    code = encode_u3(profile, "b04edb83f10e")
    assert "MOD:c100f00m00" in code
    assert validate_u3_format(code)
    fields = parse_u3(code)
    assert (fields["modal_cardinal"], fields["modal_fixed"]) == ("100", "00")


def test_full_ratios_everywhere_parse(air_profile):
    profile = dataclasses.replace(
        air_profile,
        modal=ModalBalance(1.0, 1.0, 1.0),
        cognition=CognitionProfile(1.0, 1.0, 1.0, 1.0, 1.0),
    )
    code = encode_u3(profile, "b04edb83f10e")
    assert "MOD:c100f100m100|COG:F100C100V100S100Cr100|" in code
    fields = parse_u3(code)
    assert fields["cog_creative"] == "100"
    assert fields["int_tone"] == "P"


# ─── Validation ───────────────────────────────────────────────────────────────

def test_validate_reference():
    assert validate_u3_format(REFERENCE)


@pytest.mark.parametrize("code", [
    "",
    REFERENCE.replace("E:A", "E:X"),
    REFERENCE.replace("CHIP:b04edb83f10e", "CHIP:B04EDB83F10E"),
    REFERENCE.replace("CHIP:b04edb83f10e", "CHIP:b04edb83f1"),
    REFERENCE + "|",
    REFERENCE.replace("c31", "c101"),
    REFERENCE.replace("c31", "c3"),
    REFERENCE.replace("HCS-U3", "HCS-U4"),
])
def test_validate_rejects(code):
    assert not validate_u3_format(code)


# ─── Parsing ──────────────────────────────────────────────────────────────────

def test_parse_reference():
    assert parse_u3(REFERENCE) == {
        "element": "A",
        "modal_cardinal": "31",
        "modal_fixed": "23",
        "modal_mutable": "46",
        "cog_fluid": "52",
        "cog_crystallized": "13",
        "cog_verbal": "53",
        "cog_strategic": "15",
        "cog_creative": "33",
        "int_pace": "B",
        "int_structure": "M",
        "int_tone": "P",
        "chip": "b04edb83f10e",
    }


def test_parse_invalid_raises():
    with pytest.raises(ValidationError):
        parse_u3("HCS-U3|nope")
