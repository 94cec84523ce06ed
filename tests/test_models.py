"""
Tests for MonthWindow.
"""
from datetime import date

import pytest

from bizdash.commission_dashboard.models import MonthWindow


def test_months_sorted_and_deduplicated():
    window = MonthWindow.of(2026, [2, 0, 2])
    assert window.months == (0, 2)


def test_out_of_range_month_rejected():
    with pytest.raises(ValueError):
        MonthWindow.of(2026, [12])


def test_empty_months_means_whole_year():
    window = MonthWindow.of(2026, [])

    assert window.is_whole_year
    assert window.effective_months == tuple(range(12))
    assert window.start_date == date(2026, 1, 1)
    assert window.end_date == date(2026, 12, 31)
    assert window.label() == "Ano inteiro 2026"


def test_date_range_spans_first_to_last_month():
    window = MonthWindow.of(2024, [0, 1])

    assert window.start_date == date(2024, 1, 1)
    assert window.end_date == date(2024, 2, 29)


def test_absolute_months():
    assert MonthWindow.of(2026, [0, 11]).absolute_months() == [2026 * 12, 2026 * 12 + 11]


def test_label_lists_month_names():
    assert MonthWindow.of(2026, [0, 1]).label() == "Janeiro, Fevereiro / 2026"
