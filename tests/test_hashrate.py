import pytest

from dmnd_proxy.hashrate import DEFAULT_HASHRATE, HashUnit, format_hashrate, parse_hashrate


def test_units_from_str_any_case():
    assert HashUnit.from_str("t") is HashUnit.TERA
    assert HashUnit.from_str("P") is HashUnit.PETA
    assert HashUnit.from_str("e") is HashUnit.EXA
    assert HashUnit.from_str("G") is None


def test_multipliers_increase_by_thousand():
    tera = HashUnit.from_str("T")
    peta = HashUnit.from_str("P")
    exa = HashUnit.from_str("E")
    assert peta.multiplier == tera.multiplier * 1000
    assert exa.multiplier == peta.multiplier * 1000


def test_parse_uses_unit_multiplier():
    assert parse_hashrate("10T") == 10 * HashUnit.TERA.multiplier
    assert parse_hashrate("5E") == 5 * HashUnit.EXA.multiplier


def test_parse_is_case_insensitive_and_trims():
    assert parse_hashrate("2.5p") == parse_hashrate("2.5P")
    assert parse_hashrate("  5E \n") == parse_hashrate("5E")


def test_parse_empty():
    with pytest.raises(ValueError, match="Hashrate cannot be empty"):
        parse_hashrate("   ")


def test_parse_invalid_unit():
    with pytest.raises(ValueError, match="Invalid unit 'X'"):
        parse_hashrate("10X")


@pytest.mark.parametrize("text", ["abcT", "T", "1_0T", "5 T"])
def test_parse_invalid_number(text):
    with pytest.raises(ValueError, match="Invalid number"):
        parse_hashrate(text)


@pytest.mark.parametrize("text", ["1e30E", "infT", "nanP"])
def test_parse_too_large_or_invalid(text):
    with pytest.raises(ValueError, match="Hashrate too large or invalid"):
        parse_hashrate(text)


def test_format_default_hashrate():
    assert format_hashrate(DEFAULT_HASHRATE) == "100.00T"


def test_format_small_value_has_no_unit():
    assert format_hashrate(999.0) == "999.00"


def test_format_round_trip():
    for text in ("1.00T", "2.50P", "7.25E", "12.00T"):
        assert format_hashrate(parse_hashrate(text)) == text


def test_format_picks_largest_unit():
    assert format_hashrate(HashUnit.EXA.multiplier).endswith("E")
    assert format_hashrate(HashUnit.PETA.multiplier).endswith("P")
    assert format_hashrate(HashUnit.TERA.multiplier).endswith("T")