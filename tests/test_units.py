import pytest

from layerdive.units import format_bytes, parse_bytes


def test_format_small_values_are_plain_bytes():
    assert format_bytes(5) == "5 B"


def test_format_hundreds_of_bytes():
    assert format_bytes(600) == "600 B"


@pytest.mark.parametrize("size", [10, 99, 999])
def test_format_below_a_kilobyte_uses_bytes_unit(size):
    assert format_bytes(size) == f"{size} B"


@pytest.mark.parametrize(
    "size, suffix",
    [(1000, "kB"), (1_000_000, "MB"), (1_000_000_000, "GB"), (10**12, "TB")],
)
def test_format_powers_of_thousand_choose_unit(size, suffix):
    assert format_bytes(size).endswith(" " + suffix)


def test_format_rejects_negative():
    with pytest.raises(ValueError):
        format_bytes(-1)


def test_parse_kilobytes():
    assert parse_bytes("50kB") == 50000


@pytest.mark.parametrize("size", [0, 1, 7, 42, 123456])
def test_parse_plain_numbers_round_trip(size):
    assert parse_bytes(str(size)) == size
    assert parse_bytes(f"{size} B") == size
    assert parse_bytes(f"{size}b") == size


def test_parse_binary_and_decimal_units_relate():
    assert parse_bytes("1 KiB") == 1024 * parse_bytes("1")
    assert parse_bytes("1 MiB") == 1024 * parse_bytes("1 KiB")
    assert parse_bytes("1kB") == 1000 * parse_bytes("1 B")
    assert parse_bytes("1 GB") == 1000 * parse_bytes("1 MB")


def test_parse_is_case_insensitive_and_trims():
    assert parse_bytes("3 KB") == parse_bytes("3kb")
    assert parse_bytes("3  kb  ") == parse_bytes("3kB")


def test_parse_ignores_thousands_separators():
    assert parse_bytes("1,000") == parse_bytes("1000")


def test_parse_fractions_truncate():
    assert parse_bytes("1.5") == 1
    assert parse_bytes("1.5kB") == parse_bytes("1500")


@pytest.mark.parametrize("text", ["1BB", "-1BB", "disabled", "", "kB", "1.2.3", "5 zz"])
def test_parse_invalid_raises(text):
    with pytest.raises(ValueError):
        parse_bytes(text)


def test_parse_too_large_raises():
    with pytest.raises(ValueError):
        parse_bytes("100000 EB")