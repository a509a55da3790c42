"""Tests for deficit accumulation, response score and confidence tiers."""

from __future__ import annotations

import pytest

from bodyintel.tracking.confidence import confidence_level, rate_confidence
from bodyintel.tracking.deficit import accumulate_deficit
from bodyintel.tracking.models import ConfidenceLevel, ResponseStatus
from bodyintel.tracking.response import (
    classify_response,
    evaluate_response,
    expected_weight_loss,
)


class TestAccumulateDeficit:
    """Tests for accumulate_deficit function."""

    def test_one_week_at_500(self, catalog, make_log, today) -> None:
        """BMR 1600, 7 days at 500 kcal -> 7700 kcal deficit."""
        logs = [make_log(i) for i in range(7)]
        summary = accumulate_deficit(logs, catalog, 1600, today, 30)
        assert summary.accumulated_deficit == pytest.approx(7700)
        assert summary.days_with_data == 7
        assert summary.has_data

    def test_active_energy_added(self, catalog, make_log, today) -> None:
        """Wearable active energy and workout calories raise TDEE."""
        logs = [make_log(0, active_energy=300), make_log(1, workout_calories=200)]
        summary = accumulate_deficit(logs, catalog, 1600, today)
        assert summary.accumulated_deficit == pytest.approx((1900 - 500) + (1800 - 500))

    def test_surplus_is_negative(self, catalog, make_log, today) -> None:
        """Eating above TDEE accumulates a negative deficit."""
        logs = [make_log(0, meals=4)]
        summary = accumulate_deficit(logs, catalog, 1600, today)
        assert summary.accumulated_deficit == pytest.approx(-400)

    def test_skips_days_without_food(self, catalog, make_log, today) -> None:
        """Days with nothing eaten are treated as not logged."""
        logs = [make_log(0), make_log(1, meals=0), make_log(2, meals=0, active_energy=500)]
        summary = accumulate_deficit(logs, catalog, 1600, today)
        assert summary.days_with_data == 1
        assert summary.accumulated_deficit == pytest.approx(1100)

    def test_period_window(self, catalog, make_log, today) -> None:
        """Only logs in (today - period, today] count."""
        logs = [make_log(0), make_log(6), make_log(7), make_log(-1)]
        summary = accumulate_deficit(logs, catalog, 1600, today, period_days=7)
        assert summary.days_with_data == 2

    def test_non_positive_bmr(self, catalog, make_log, today) -> None:
        """BMR of zero yields no data."""
        summary = accumulate_deficit([make_log(0)], catalog, 0, today)
        assert summary.accumulated_deficit == 0
        assert not summary.has_data


class TestResponse:
    """Tests for expected vs. actual weight change."""

    def test_expected_weight_loss(self) -> None:
        """7700 kcal per kg, never negative."""
        assert expected_weight_loss(7700) == pytest.approx(1.0)
        assert expected_weight_loss(-7700) == 0

    def test_classify_bands(self) -> None:
        """80-120 is normal, with inclusive edges."""
        assert classify_response(80) == ResponseStatus.NORMAL
        assert classify_response(120) == ResponseStatus.NORMAL
        assert classify_response(79) == ResponseStatus.SLOW
        assert classify_response(121) == ResponseStatus.FAST

    def test_on_track(self, make_weigh_in, today) -> None:
        """80 -> 79.1 kg against 1.0 kg expected scores 90."""
        weigh_ins = [make_weigh_in(20, 80.0), make_weigh_in(0, 79.1)]
        result = evaluate_response(7700, weigh_ins, today)
        assert result.response_score == 90
        assert result.response_status == ResponseStatus.NORMAL
        assert result.actual_weight_loss == pytest.approx(0.9)

    def test_uses_endpoints(self, make_weigh_in, today) -> None:
        """Only the first and last weigh-in of the period matter."""
        weigh_ins = [
            make_weigh_in(0, 78.5),
            make_weigh_in(10, 83.0),
            make_weigh_in(25, 80.0),
            make_weigh_in(40, 90.0),
        ]
        result = evaluate_response(7700, weigh_ins, today)
        assert result.actual_weight_loss == pytest.approx(1.5)
        assert result.response_score == 150
        assert result.response_status == ResponseStatus.FAST
        assert result.weigh_in_count == 3

    def test_slow(self, make_weigh_in, today) -> None:
        """Weight going up against a deficit is a negative, slow score."""
        weigh_ins = [make_weigh_in(20, 80.0), make_weigh_in(0, 80.5)]
        result = evaluate_response(7700, weigh_ins, today)
        assert result.response_score == -50
        assert result.response_status == ResponseStatus.SLOW

    def test_needs_two_weigh_ins(self, make_weigh_in, today) -> None:
        """A single weigh-in is insufficient data."""
        result = evaluate_response(7700, [make_weigh_in(0, 80.0)], today)
        assert result.response_status == ResponseStatus.INSUFFICIENT_DATA
        assert result.response_score == 0
        assert result.actual_weight_loss == 0

    def test_small_expected_loss(self, make_weigh_in, today) -> None:
        """Expected loss of 0.1 kg or less is not scored."""
        weigh_ins = [make_weigh_in(20, 80.0), make_weigh_in(0, 79.0)]
        result = evaluate_response(770, weigh_ins, today)
        assert result.response_status == ResponseStatus.INSUFFICIENT_DATA
        assert result.actual_weight_loss == pytest.approx(1.0)


class TestConfidence:
    """Tests for confidence tiers."""

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, ConfidenceLevel.VERY_LOW),
            (2, ConfidenceLevel.VERY_LOW),
            (3, ConfidenceLevel.LOW),
            (6, ConfidenceLevel.LOW),
            (7, ConfidenceLevel.MEDIUM),
            (13, ConfidenceLevel.MEDIUM),
            (14, ConfidenceLevel.HIGH),
            (30, ConfidenceLevel.HIGH),
        ],
    )
    def test_thresholds(self, days, expected) -> None:
        """Tiers step at 3, 7 and 14 days."""
        assert confidence_level(days) == expected

    def test_enough_data_from_medium(self) -> None:
        """has_enough_data starts at the medium tier."""
        assert not rate_confidence(6).has_enough_data
        assert rate_confidence(7).has_enough_data
        assert rate_confidence(14).has_enough_data

    def test_messages(self) -> None:
        """Each tier carries its advisory message."""
        assert "at least 3 days" in rate_confidence(1).message
        assert "14+" in rate_confidence(20).message
