import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from summerge import MalformedValue, Variant, build_key, decode_chromosome  # noqa: E402
from summerge.config import FileColumns  # noqa: E402
from summerge.variants import (  # noqa: E402
    parse_float32,
    parse_position,
    parse_statistic,
    parse_variant,
    to_float32,
)

COLUMNS = FileColumns(0, 1, 2, 3, 4, 5, 6, 7)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("1", 1),
        ("22", 22),
        ("X", 23),
        ("x", 23),
        ("Y", 24),
        ("y", 24),
        ("MT", 25),
        ("mt", 25),
        ("M", 25),
        ("MITO", 25),
        ("Mitochondrial", 25),
        (" 5 ", 5),
        ("4294967295", 4294967295),
    ],
)
def test_decode_chromosome_accepts_numeric_and_named_tokens(token: str, expected: int) -> None:
    assert decode_chromosome(token) == expected


@pytest.mark.parametrize("token", ["", "-1", "+1", "invalid", "1.5", "4294967296", "chr1"])
def test_decode_chromosome_rejects_invalid_tokens(token: str) -> None:
    with pytest.raises(MalformedValue) as excinfo:
        decode_chromosome(token)

    assert excinfo.value.field == "chromosome"


def test_build_key_joins_cpra_with_delimiter() -> None:
    variant = Variant(chromosome=1, position=12345, ref="A", alt="T")

    assert build_key(variant, "\t") == "1\t12345\tA\tT"
    assert build_key(variant, ":") == "1:12345:A:T"


def test_parse_position_bounds() -> None:
    assert parse_position("18446744073709551615") == 2**64 - 1

    for text in ("18446744073709551616", "-1", "12.5", "", " 12"):
        with pytest.raises(MalformedValue):
            parse_position(text)


def test_parse_float32_rounds_to_single_precision() -> None:
    assert parse_float32("1e-8", "pvalue") == to_float32(1e-8)
    assert parse_float32("-2.5", "beta") == -2.5
    assert parse_float32(".5", "af") == 0.5

    for text in ("abc", "", " 0.1", "1e40", "0x1p-2"):
        with pytest.raises(MalformedValue):
            parse_float32(text, "pvalue")


def test_parse_variant_uses_decoded_chromosome() -> None:
    variant = parse_variant(["X", "100", "A", "G", "0.01", "0", "0", "0"], COLUMNS)

    assert variant == Variant(chromosome=23, position=100, ref="A", alt="G")


def test_parse_variant_reports_row_number() -> None:
    with pytest.raises(MalformedValue) as excinfo:
        parse_variant(["chrZ", "100", "A", "G"], COLUMNS, row=7)

    assert excinfo.value.row == 7
    assert "row 7" in str(excinfo.value)


def test_parse_statistic_formats_values_for_storage() -> None:
    statistic = parse_statistic(["1", "12345", "A", "T", "0.001", "0.5", "0.1", "0.3"], COLUMNS)

    assert statistic.formatted() == ("1.000000e-03", "0.500000", "0.100000", "0.300000")


def test_parse_statistic_formats_negative_beta() -> None:
    statistic = parse_statistic(["1", "1", "A", "T", "0.005", "-0.3", "0.08", "0.2"], COLUMNS)

    assert statistic.formatted() == ("5.000000e-03", "-0.300000", "0.080000", "0.200000")


@pytest.mark.parametrize(
    ("position", "field"),
    [(4, "pvalue"), (5, "beta"), (6, "sebeta"), (7, "allele frequency")],
)
def test_parse_statistic_names_the_bad_field(position: int, field: str) -> None:
    row = ["1", "12345", "A", "T", "0.001", "0.5", "0.1", "0.3"]
    row[position] = "INVALID"

    with pytest.raises(MalformedValue) as excinfo:
        parse_statistic(row, COLUMNS, row=3)

    assert excinfo.value.field == field
    assert excinfo.value.row == 3


def test_parse_statistic_formats_non_finite_values() -> None:
    statistic = parse_statistic(["1", "1", "A", "T", "NaN", "Inf", "-inf", "0.2"], COLUMNS)

    assert statistic.formatted() == ("NaN", "+Inf", "-Inf", "0.200000")
