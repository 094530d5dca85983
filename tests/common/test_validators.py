import pytest

from src.hr_records.hr_records.common.validators import (
    optional_int,
    optional_text,
    require_int,
    require_int_between,
    require_max_length,
    require_non_empty,
)
from src.hr_records.hr_records.core.exceptions import ValidationError


@pytest.mark.parametrize("value, expected", [(3, 3), ("3", 3), (" 12 ", 12), (4.0, 4)])
def test_require_int_accepts_integral_input(value, expected):
    assert require_int(value, "Version") == expected


@pytest.mark.parametrize("value", ["abc", "", None, True, 2.5, [], {}])
def test_require_int_rejects_everything_else(value):
    with pytest.raises(ValidationError, match="Version must be an integer"):
        require_int(value, "Version")


def test_optional_int_passes_none_through():
    assert optional_int(None, "Rating") is None
    with pytest.raises(ValidationError):
        optional_int("five", "Rating")


def test_int_between_rejects_text_before_range():
    with pytest.raises(ValidationError, match="must be an integer"):
        require_int_between("five", "Rating", 1, 5)
    assert require_int_between("4", "Rating", 1, 5) == 4


def test_optional_text_strips_and_blanks_to_none():
    assert optional_text("  ski week ", "Reason") == "ski week"
    assert optional_text("   ", "Reason") is None
    assert optional_text(None, "Reason") is None


@pytest.mark.parametrize(
    "check",
    [
        lambda: require_non_empty(12345678901, "Feedback content"),
        lambda: optional_text(5, "Reason"),
        lambda: require_max_length(["a"], "Comment", 500),
    ],
)
def test_non_text_values_are_validation_errors(check):
    with pytest.raises(ValidationError, match="must be a string"):
        check()
