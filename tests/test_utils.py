"""Unit tests for utility functions."""
from workout_timer_api.utils import clock_to_seconds, positive_int, to_int, to_seconds


class TestUtils:
    """Test cases for utility functions."""

    def test_to_int_valid(self):
        """Test to_int with valid input."""
        assert to_int("10") == 10
        assert to_int("0") == 0
        assert to_int("-5") == -5
        assert to_int(7.9) == 7
        assert to_int("8.0") == 8

    def test_to_int_invalid(self):
        """Test to_int with invalid input."""
        assert to_int("abc") is None
        assert to_int("") is None
        assert to_int(None) is None
        assert to_int(True) is None

    def test_clock_to_seconds(self):
        assert clock_to_seconds("2:30") == 150
        assert clock_to_seconds("0:45") == 45
        assert clock_to_seconds("10") is None
        assert clock_to_seconds("abc") is None

    def test_positive_int_falls_back_on_non_positive(self):
        assert positive_int("12", 8) == 12
        assert positive_int(0, 8) == 8
        assert positive_int(-3, 8) == 8
        assert positive_int("lots", 8) == 8
        assert positive_int(None, 8) == 8


class TestToSeconds:
    """Loosely typed durations coming back from the provider."""

    def test_numbers_are_seconds(self):
        assert to_seconds(45) == 45
        assert to_seconds(45.6) == 45

    def test_strings_with_units(self):
        assert to_seconds("45") == 45
        assert to_seconds("45s") == 45
        assert to_seconds("45 sec") == 45
        assert to_seconds("2 min") == 120
        assert to_seconds("1.5 minutes") == 90

    def test_clock_strings(self):
        assert to_seconds("2:30") == 150
        assert to_seconds(":45") == 45

    def test_unparseable(self):
        assert to_seconds(None) is None
        assert to_seconds(False) is None
        assert to_seconds("a while") is None
