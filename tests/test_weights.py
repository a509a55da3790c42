"""Tests for weigh-in windows, rolling averages and unit conversion."""

from __future__ import annotations

from datetime import timedelta

import pytest

from bodyintel.tracking.rounding import round_half_up, round_to
from bodyintel.tracking.weights import (
    convert_to_kg,
    convert_weight,
    format_weight,
    format_weight_change,
    in_trailing_period,
    rolling_weight_average,
    sorted_in_period,
)


class TestRounding:
    """Tests for half-up rounding helpers."""

    def test_half_rounds_up(self) -> None:
        """Halves round towards positive infinity."""
        assert round_half_up(2.5) == 3
        assert round_half_up(79.5) == 80
        assert round_half_up(-2.5) == -2

    def test_round_to_places(self) -> None:
        """round_to keeps the requested decimals."""
        assert round_to(1.25, 1) == pytest.approx(1.3)
        assert round_to(80.8333, 2) == pytest.approx(80.83)


class TestTrailingPeriod:
    """Tests for the (today - N, today] period window."""

    def test_end_inclusive(self, today) -> None:
        """Today is inside the period."""
        assert in_trailing_period(today, today, 7)

    def test_start_exclusive(self, today) -> None:
        """The date exactly N days back is outside."""
        assert not in_trailing_period(today - timedelta(days=7), today, 7)
        assert in_trailing_period(today - timedelta(days=6), today, 7)

    def test_future_excluded(self, today) -> None:
        """Dates after today are outside."""
        assert not in_trailing_period(today + timedelta(days=1), today, 7)

    def test_sorted_in_period(self, make_weigh_in, today) -> None:
        """Records are filtered and sorted oldest first."""
        weigh_ins = [make_weigh_in(0, 79), make_weigh_in(40, 85), make_weigh_in(5, 80)]
        result = sorted_in_period(weigh_ins, today, 30)
        assert [w.weight for w in result] == [80, 79]


class TestRollingWeightAverage:
    """Tests for rolling_weight_average function."""

    def test_average(self, make_weigh_in, today) -> None:
        """Mean of the weigh-ins in the window, rounded to 2 decimals."""
        weigh_ins = [make_weigh_in(0, 80.0), make_weigh_in(2, 81.0), make_weigh_in(4, 81.5)]
        assert rolling_weight_average(weigh_ins, today) == pytest.approx(80.83)

    def test_window_inclusive_both_ends(self, make_weigh_in, today) -> None:
        """A weigh-in exactly window_days back is included."""
        weigh_ins = [make_weigh_in(7, 82.0), make_weigh_in(0, 80.0)]
        assert rolling_weight_average(weigh_ins, today) == pytest.approx(81.0)

    def test_outside_window_ignored(self, make_weigh_in, today) -> None:
        """Weigh-ins older than the window do not count."""
        weigh_ins = [make_weigh_in(8, 90.0), make_weigh_in(1, 80.0), make_weigh_in(0, 80.0)]
        assert rolling_weight_average(weigh_ins, today) == pytest.approx(80.0)

    def test_needs_two_weigh_ins(self, make_weigh_in, today) -> None:
        """A single weigh-in yields no average."""
        assert rolling_weight_average([make_weigh_in(0, 80.0)], today) is None
        assert rolling_weight_average([], today) is None

    def test_custom_window(self, make_weigh_in, today) -> None:
        """The window length is configurable."""
        weigh_ins = [make_weigh_in(3, 81.0), make_weigh_in(0, 80.0)]
        assert rolling_weight_average(weigh_ins, today, window_days=2) is None
        assert rolling_weight_average(weigh_ins, today, window_days=3) == pytest.approx(80.5)

    def test_target_date_in_past(self, make_weigh_in, today) -> None:
        """Averages can be taken at any target date."""
        weigh_ins = [make_weigh_in(15, 82.0), make_weigh_in(14, 81.0), make_weigh_in(0, 79.0)]
        target = today - timedelta(days=14)
        assert rolling_weight_average(weigh_ins, target) == pytest.approx(81.5)


class TestWeightConversion:
    """Tests for kg/lbs conversion and formatting."""

    def test_kg_to_lbs(self) -> None:
        """Display conversion uses 2.20462 lbs per kg."""
        assert convert_weight(80.0, "lbs") == pytest.approx(176.3696)
        assert convert_weight(80.0, "kg") == pytest.approx(80.0)

    def test_lbs_to_kg(self) -> None:
        """Storage conversion uses 0.453592 kg per lb."""
        assert convert_to_kg(176.37, "lbs") == pytest.approx(80.0, abs=0.01)
        assert convert_to_kg(80.0, "kg") == pytest.approx(80.0)

    def test_format_weight(self) -> None:
        """Weights carry their unit label."""
        assert format_weight(80.0, "kg") == "80.0 kg"
        assert format_weight(80.0, "lbs") == "176.4 lbs"

    def test_format_weight_change_signs(self) -> None:
        """Gains get a plus sign, losses keep their minus."""
        assert format_weight_change(1.0, "kg") == "+1.0 kg"
        assert format_weight_change(-0.5, "kg") == "-0.5 kg"
        assert format_weight_change(1.0, "lbs") == "+2.2 lbs"
        assert format_weight_change(0.0, "kg") == "0.0 kg"


def test_unsorted_input_does_not_matter(make_weigh_in, today) -> None:
    """Rolling averages do not depend on input order."""
    weigh_ins = [make_weigh_in(i, 80.0 - i * 0.1) for i in range(7)]
    assert rolling_weight_average(weigh_ins, today) == rolling_weight_average(
        list(reversed(weigh_ins)), today
    )
