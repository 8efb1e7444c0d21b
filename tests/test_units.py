import pytest

from defi_query.units import (
    fee_tier_to_bps,
    fraction_to_percent,
    parse_count,
    parse_usd,
    ray_to_percent,
    wad_to_percent,
)


def test_ray_to_percent_converts_five_percent():
    assert ray_to_percent("50000000000000000000000000") == 5.0


def test_ray_to_percent_rounds_to_four_places():
    # 3.123456789% in ray
    assert ray_to_percent("31234567890000000000000000") == 3.1235


@pytest.mark.parametrize("value", ["not-a-number", "", None, "1.5e27", {}])
def test_ray_to_percent_malformed_is_zero(value):
    assert ray_to_percent(value) == 0


def test_ray_to_percent_accepts_int():
    assert ray_to_percent(10**27) == 100.0


def test_wad_to_percent_lltv():
    assert wad_to_percent("860000000000000000") == 86.0
    assert wad_to_percent("945000000000000000") == 94.5


def test_wad_to_percent_malformed_is_zero():
    assert wad_to_percent("abc") == 0.0
    assert wad_to_percent(None) == 0.0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1234.5", 1234.5),
        (42, 42.0),
        (None, 0.0),
        ("", 0.0),
        ("n/a", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
    ],
)
def test_parse_usd(value, expected):
    assert parse_usd(value) == expected


def test_fraction_to_percent_rounding():
    assert fraction_to_percent("0.78412", 2) == 78.41
    assert fraction_to_percent(0.051234, 4) == 5.1234
    assert fraction_to_percent(None, 2) == 0.0


def test_fee_tier_to_bps():
    assert fee_tier_to_bps("500") == 5.0
    assert fee_tier_to_bps("3000") == 30.0
    assert fee_tier_to_bps(100) == 1.0
    assert fee_tier_to_bps("bogus") == 0.0


def test_parse_count():
    assert parse_count("18432") == 18432
    assert parse_count(None) == 0
    assert parse_count("12.5") == 0
