"""Tests for strict MAJOR.MINOR.PATCH parsing and ordering."""

from __future__ import annotations

import pytest

from entwine.core.errors import EntwineError, InvalidVersionError
from entwine.core.semver import Ordering, Version, compare, is_newer, parse_version


class TestParseVersion:
    def test_plain_triple(self):
        assert parse_version("1.2.3") == Version(1, 2, 3)

    def test_v_prefix_is_stripped(self):
        assert parse_version("v0.6.1") == Version(0, 6, 1)

    def test_str_round_trips_without_prefix(self):
        assert str(parse_version("v10.0.2")) == "10.0.2"

    def test_large_components_compare_numerically(self):
        assert parse_version("1.10.0") > parse_version("1.9.0")

    @pytest.mark.parametrize(
        "raw",
        [
            "1.x.0",
            "1.2",
            "1.2.3.4",
            "1.2.3-beta",
            "1.2.3+build.5",
            " 1.2.3",
            "1.2.3\n",
            "V1.2.3",
            "vv1.2.3",
            "-1.2.3",
            "",
            "latest",
        ],
    )
    def test_rejects_anything_but_a_bare_triple(self, raw: str):
        with pytest.raises(InvalidVersionError):
            parse_version(raw)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidVersionError):
            parse_version(None)  # type: ignore[arg-type]

    def test_invalid_version_is_an_entwine_error_and_value_error(self):
        with pytest.raises(EntwineError):
            parse_version("nope")
        with pytest.raises(ValueError):
            parse_version("nope")


class TestCompare:
    def test_equal(self):
        assert compare("1.2.3", "1.2.3") is Ordering.EQUAL

    def test_greater(self):
        assert compare("2.0.0", "1.9.9") is Ordering.GREATER

    def test_less(self):
        assert compare("0.5.0", "0.6.0") is Ordering.LESS

    def test_prefix_does_not_affect_ordering(self):
        assert compare("v1.2.3", "1.2.3") is Ordering.EQUAL

    def test_invalid_left_operand(self):
        with pytest.raises(InvalidVersionError):
            compare("1.x.0", "1.0.0")

    def test_invalid_right_operand(self):
        with pytest.raises(InvalidVersionError):
            compare("1.0.0", "1.0")

    def test_total_order_matches_tuple_order(self):
        versions = ["0.0.1", "0.1.0", "0.10.0", "1.0.0", "1.0.10", "1.2.0", "2.0.0"]
        for a in versions:
            for b in versions:
                expected = (parse_version(a) > parse_version(b)) - (parse_version(a) < parse_version(b))
                assert compare(a, b) == expected
                assert compare(a, b) == -compare(b, a)

    def test_sorting_with_compare_is_stable_and_numeric(self):
        shuffled = ["1.10.0", "1.2.0", "0.9.9", "1.2.10", "1.2.9"]
        assert sorted(shuffled, key=parse_version) == ["0.9.9", "1.2.0", "1.2.9", "1.2.10", "1.10.0"]


class TestIsNewer:
    def test_strictly_greater(self):
        assert is_newer("0.6.1", "0.6.0") is True

    def test_equal_is_not_newer(self):
        assert is_newer("0.6.1", "0.6.1") is False

    def test_older_is_not_newer(self):
        assert is_newer("0.5.0", "0.6.1") is False
