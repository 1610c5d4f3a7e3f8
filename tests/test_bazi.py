"""BaZi engine tests — pillars, balances, Day Master and birth-time handling.

Tests cover:
    - Year / month / day / hour pillar arithmetic
    - Element and Yin/Yang balance for a known chart
    - Day Master strength
    - Timezone fallback (unknown, malformed and path-like names), day overflow
    - DST gaps and repeated wall times
    - Birth-info range validation
"""

import pytest

from hcs.bazi import (
    Pillar,
    calculate_element_balance,
    compute_chinese_profile,
    compute_day_pillar,
    compute_hour_pillar,
    compute_month_pillar,
    compute_year_pillar,
    dominant_element,
    is_generating_element,
    local_birth_time,
    resolve_timezone,
)
from hcs.errors import ValidationError
from hcs.model import BirthInfo


# ─── Pillars ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("year, expected", [
    (1924, "Jia-Zi"),
    (1984, "Jia-Zi"),
    (1990, "Geng-Wu"),
    (2000, "Geng-Chen"),
    (1900, "Geng-Zi"),
])
def test_year_pillar(year, expected):
    assert str(compute_year_pillar(year)) == expected


def test_year_pillar_before_epoch_is_non_negative():
    p = compute_year_pillar(1923)
    assert (p.stem_index, p.branch_index) == (9, 11)
    assert str(p) == "Gui-Hai"


def test_month_pillar():
    # Year stem Jia (0): stem = (0*2 + month) % 10
    assert str(compute_month_pillar(1984, 1)) == "Yi-Yin"
    assert str(compute_month_pillar(1984, 11)) == "Yi-Zi"
    assert str(compute_month_pillar(1984, 12)) == "Bing-Chou"


def test_day_pillar_anchor_and_cycle():
    assert str(compute_day_pillar(1900, 1, 1)) == "Jia-Zi"
    assert str(compute_day_pillar(1900, 1, 11)) == "Jia-Xu"
    # 60-day cycle
    assert compute_day_pillar(1900, 3, 2) == compute_day_pillar(1900, 1, 1)


def test_day_pillar_known_date():
    assert str(compute_day_pillar(1984, 1, 1)) == "Jia-Shen"


@pytest.mark.parametrize("hour, expected", [
    (23, "Jia-Zi"),
    (0, "Jia-Zi"),
    (1, "Yi-Chou"),
    (2, "Yi-Chou"),
    (12, "Geng-Wu"),
])
def test_hour_pillar_from_jia_day(hour, expected):
    day = Pillar.from_indices(0, 0)
    assert str(compute_hour_pillar(day, hour)) == expected


# ─── Balances ─────────────────────────────────────────────────────────────────

def test_jiazi_chart(jiazi_chinese):
    ch = jiazi_chinese
    assert (ch.year_pillar, ch.month_pillar, ch.day_pillar, ch.hour_pillar) == (
        "Jia-Zi", "Yi-Yin", "Jia-Shen", "Jia-Zi",
    )
    assert ch.day_master == "Jia"
    assert ch.yin_yang_balance == pytest.approx(5 / 6)
    assert ch.element_balance == pytest.approx({
        "Wood": 0.75, "Fire": 0.0, "Earth": 0.0, "Metal": 1 / 12, "Water": 1 / 6,
    })
    assert ch.day_master_strength == pytest.approx(0.95)
    assert ch.dominant_element() == "Wood"
    assert ch.yin_yang_type() == "Yang-dominant"
    assert ch.day_master_type() == "Strong"
    assert ch.day_master_index() == 0


@pytest.mark.parametrize("info", [
    BirthInfo(1990, 6, 15, 14, 30, "UTC"),
    BirthInfo(1955, 11, 2, 3, 0, "Asia/Shanghai"),
    BirthInfo(2024, 2, 29, 23, 59, "America/New_York"),
    BirthInfo(2100, 12, 31, 0, 0),
])
def test_element_balance_sums_to_one(info):
    ch = compute_chinese_profile(info)
    assert sum(ch.element_balance.values()) == pytest.approx(1.0, abs=0.01)
    assert 0.0 <= ch.yin_yang_balance <= 1.0
    assert 0.0 <= ch.day_master_strength <= 1.0


def test_element_balance_of_no_pillars_is_all_zero():
    assert set(calculate_element_balance([]).values()) == {0.0}


def test_dominant_element_tie_goes_to_earliest():
    assert dominant_element({"Water": 0.4, "Fire": 0.4, "Wood": 0.2}) == "Fire"
    assert dominant_element({}) == ""


def test_generation_cycle():
    assert is_generating_element("Water", "Wood")
    assert not is_generating_element("Wood", "Water")


def test_chinese_profile_to_dict_sorts_element_balance(jiazi_chinese):
    data = jiazi_chinese.to_dict()
    assert list(data["elementBalance"]) == ["Earth", "Fire", "Metal", "Water", "Wood"]
    assert data["yearPillar"] == "Jia-Zi"


# ─── Birth time ───────────────────────────────────────────────────────────────

def test_unknown_timezone_falls_back_to_utc():
    assert resolve_timezone("Mars/Olympus_Mons") is resolve_timezone("UTC")
    assert resolve_timezone("") is resolve_timezone("UTC")


@pytest.mark.parametrize("name", [
    "UTC+99",
    "EST5EDT,M3.2.0,M11.1.0+99",
    "/etc/passwd",
    "../../etc/passwd",
    "Europe/../../etc/passwd",
    "\\etc\\passwd",
])
def test_unresolvable_timezone_falls_back_to_utc(name):
    assert resolve_timezone(name) is resolve_timezone("UTC")


def test_unresolvable_timezone_computes_utc_chart(jiazi_chinese):
    odd = compute_chinese_profile(BirthInfo(1984, 1, 1, 0, 0, "UTC+99"))
    assert odd == jiazi_chinese


def test_day_overflow_rolls_into_next_month():
    local = local_birth_time(BirthInfo(1985, 2, 31, 10, 0))
    assert (local.year, local.month, local.day) == (1985, 3, 3)


def test_day_overflow_uses_rolled_date_for_pillars():
    rolled = compute_chinese_profile(BirthInfo(1985, 2, 31, 10, 0))
    direct = compute_chinese_profile(BirthInfo(1985, 3, 3, 10, 0))
    assert rolled == direct


def test_dst_gap_west_of_utc_moves_back():
    # 02:30 does not exist in New York on 2021-03-14
    local = local_birth_time(BirthInfo(2021, 3, 14, 2, 30, "America/New_York"))
    assert (local.hour, local.minute) == (1, 30)
    ch = compute_chinese_profile(BirthInfo(2021, 3, 14, 2, 30, "America/New_York"))
    assert ch.hour_pillar == "Ji-Chou"


def test_dst_gap_east_of_utc_moves_forward():
    # 02:30 does not exist in Paris on 2021-03-28
    local = local_birth_time(BirthInfo(2021, 3, 28, 2, 30, "Europe/Paris"))
    assert (local.hour, local.minute) == (3, 30)


def test_repeated_wall_time_keeps_its_fields():
    local = local_birth_time(BirthInfo(2021, 11, 7, 1, 30, "America/New_York"))
    assert (local.day, local.hour, local.minute) == (7, 1, 30)


def test_local_fields_are_used_as_given():
    ch = compute_chinese_profile(BirthInfo(1984, 1, 1, 0, 0, "Asia/Tokyo"))
    assert ch.hour_pillar == "Jia-Zi"
    assert ch.day_pillar == "Jia-Shen"


# ─── Validation ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("info, field", [
    (BirthInfo(1899, 1, 1), "birthInfo.year"),
    (BirthInfo(2101, 1, 1), "birthInfo.year"),
    (BirthInfo(1990, 0, 1), "birthInfo.month"),
    (BirthInfo(1990, 13, 1), "birthInfo.month"),
    (BirthInfo(1990, 1, 32), "birthInfo.day"),
    (BirthInfo(1990, 1, 1, 24), "birthInfo.hour"),
    (BirthInfo(1990, 1, 1, 0, 60), "birthInfo.minute"),
])
def test_birth_info_out_of_range(info, field):
    with pytest.raises(ValidationError) as exc:
        compute_chinese_profile(info)
    assert exc.value.field == field
