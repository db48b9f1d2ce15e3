from datetime import date

import pytest

from src.fellowship_reports.fellowship_reports.common.numbers import (
    pct,
    percentage_change,
    round_half_up,
    safe_average,
)
from src.fellowship_reports.fellowship_reports.common.validators import require_date_range, require_non_empty
from src.fellowship_reports.fellowship_reports.core.exceptions import ValidationError


def test_pct_zero_denominator_is_zero_percent():
    assert pct(0, 0) == "0%"
    assert pct(3, 0) == "0%"


def test_pct_whole_number():
    assert pct(1, 4) == "25%"
    assert pct(2, 3) == "67%"


def test_pct_rounds_half_up():
    assert pct(1, 8) == "13%"


def test_round_half_up_on_negative_half():
    assert round_half_up(2.5) == 3
    assert round_half_up(-12.5) == -12


def test_safe_average():
    assert safe_average(0, 0) == 0
    assert safe_average(10, 4) == 3
    assert safe_average(9, 3) == 3


def test_percentage_change():
    assert percentage_change(50, 40) == 25
    assert percentage_change(30, 40) == -25
    assert percentage_change(5, 0) is None


def test_require_date_range_rejects_inverted_range():
    with pytest.raises(ValidationError):
        require_date_range(date(2026, 3, 5), date(2026, 3, 1), today=date(2026, 3, 10))


def test_require_date_range_rejects_future_start():
    with pytest.raises(ValidationError):
        require_date_range(date(2026, 4, 1), date(2026, 4, 30), today=date(2026, 3, 10))


def test_require_date_range_allows_future_end():
    require_date_range(date(2026, 3, 1), date(2026, 3, 31), today=date(2026, 3, 10))


def test_require_non_empty():
    assert require_non_empty("  mgr ", "User") == "mgr"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "User")
