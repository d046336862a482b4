import math

from evented.utils.compare import MISSING
from evented.utils.compare import loose_equals


def test_identical_values_are_equal():
    marker = object()
    assert loose_equals(marker, marker)
    assert loose_equals("a", "a")


def test_number_and_numeric_string():
    assert loose_equals(5, "5")
    assert loose_equals("5", 5)
    assert loose_equals(1.5, " 1.5 ")
    assert not loose_equals(5, "five")


def test_empty_string_is_zero():
    assert loose_equals(0, "")
    assert not loose_equals(1, "")


def test_bool_compares_as_integer():
    assert loose_equals(True, 1)
    assert loose_equals(False, "0")
    assert not loose_equals(True, 2)


def test_none_and_missing():
    assert loose_equals(None, MISSING)
    assert loose_equals(MISSING, None)
    assert not loose_equals(None, 0)
    assert not loose_equals(None, "")
    assert not loose_equals(MISSING, False)


def test_nan_equals_nothing():
    nan = float("nan")
    assert not loose_equals(nan, nan)
    assert not loose_equals(nan, "nan")
    assert math.isnan(nan)


def test_strings_compare_without_coercion():
    assert not loose_equals("1.0", "1")
    assert loose_equals("abc", "abc")


def test_containers_use_equality():
    assert loose_equals([1, 2], [1, 2])
    assert not loose_equals({"a": 1}, {"a": 2})


def test_numeric_string_literals():
    assert loose_equals(16, "0x10")
    assert loose_equals(8, "0o10")
    assert loose_equals(2, "0b10")
    assert loose_equals(1500, "1.5e3")
    assert loose_equals(0.5, ".5")
    assert loose_equals(-3, "-3.")
    assert loose_equals(math.inf, "Infinity")
    assert loose_equals(-math.inf, "-Infinity")


def test_non_literal_numeric_spellings_are_unequal():
    assert not loose_equals(1000, "1_000")
    assert not loose_equals(math.inf, "inf")
    assert not loose_equals(math.inf, "infinity")
    assert not loose_equals(-16, "-0x10")
    assert not loose_equals(5, "٥")
    for text in ("nan", "NaN"):
        assert not loose_equals(math.nan, text)
        assert not loose_equals(0, text)
