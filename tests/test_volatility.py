from __future__ import annotations

import math

import pytest

from lp_analytics.domain.entities.analytics import AnalyticsCondition, MetricResult
from lp_analytics.domain.entities.position import PriceRange
from lp_analytics.domain.services.volatility import (
    DAYS_PER_YEAR,
    delta,
    effective_dte,
    effective_dte_years,
    implied_volatility,
    option_value,
    probability_of_profit,
)


RANGE = PriceRange(lower=1000.0, upper=4000.0)


class TestImpliedVolatility:
    def test_closed_form(self):
        result = implied_volatility(3000, 1_000_000.0, 10_000_000.0)
        expected = 2 * 3000 * math.sqrt(365 * 0.1) / 1e6
        assert result.value == pytest.approx(expected)

    @pytest.mark.parametrize(
        "volume,tvl",
        [(None, 1.0), (1.0, None), (1.0, 0.0), (-1.0, 1.0)],
    )
    def test_missing_market_data(self, volume, tvl):
        result = implied_volatility(3000, volume, tvl)
        assert result.value is None
        assert result.condition == AnalyticsCondition.MISSING_MARKET_DATA

    def test_zero_volume_means_zero_volatility_value(self):
        assert implied_volatility(3000, 0.0, 1000.0).value == 0.0


class TestEffectiveDte:
    def test_closed_form_in_days(self):
        result = effective_dte(MetricResult.of(2.0), MetricResult.of(0.5))
        root = math.sqrt(2.0)
        expected_years = (2 * math.pi / 0.25) * (root - 1) ** 2 / (root + 1) ** 2
        assert result.value == pytest.approx(expected_years * DAYS_PER_YEAR)
        assert effective_dte_years(2.0, 0.5) == pytest.approx(expected_years)

    def test_below_one_day_is_a_sentinel(self):
        result = effective_dte(MetricResult.of(1.0001), MetricResult.of(1.0))
        assert result.value is None
        assert result.condition == AnalyticsCondition.BELOW_ONE_DAY

    def test_minimum_days_is_configurable(self):
        result = effective_dte(MetricResult.of(2.0), MetricResult.of(0.5), min_days=1000.0)
        assert result.condition == AnalyticsCondition.BELOW_ONE_DAY

    def test_zero_volatility_is_undefined(self):
        result = effective_dte(MetricResult.of(2.0), MetricResult.of(0.0))
        assert result.condition == AnalyticsCondition.ZERO_VOLATILITY

    def test_propagates_unavailable_inputs(self):
        degenerate = MetricResult.unavailable(AnalyticsCondition.DEGENERATE_RANGE)
        missing = MetricResult.unavailable(AnalyticsCondition.MISSING_MARKET_DATA)

        assert effective_dte(degenerate, MetricResult.of(0.5)).condition == AnalyticsCondition.DEGENERATE_RANGE
        assert effective_dte(MetricResult.of(2.0), missing).condition == AnalyticsCondition.MISSING_MARKET_DATA

    def test_years_rejects_zero_volatility(self):
        with pytest.raises(ValueError):
            effective_dte_years(2.0, 0.0)


class TestDelta:
    def test_delta_is_zero_below_range_and_one_above(self):
        assert delta(500.0, 2000.0, 30.0, 0.5, price_range=RANGE).value == 0.0
        assert delta(5000.0, 2000.0, 30.0, 0.5, price_range=RANGE).value == 1.0

    def test_delta_stays_in_unit_interval_and_falls_with_price(self):
        values = [delta(price, 2000.0, 30.0, 0.5, price_range=RANGE).value for price in (1500.0, 2000.0, 2500.0)]

        assert all(0.0 <= value <= 1.0 for value in values)
        assert values[0] > values[1] > values[2]

    def test_at_the_money_delta_is_below_half(self):
        assert delta(2000.0, 2000.0, 30.0, 0.5).value < 0.5

    def test_zero_volatility_is_undefined(self):
        assert delta(2000.0, 2000.0, 30.0, 0.0).condition == AnalyticsCondition.ZERO_VOLATILITY


class TestOptionValue:
    def test_at_the_money_value_is_positive(self):
        result = option_value(2000.0, 2000.0, 30.0, 0.5)
        assert result.value > 0

    def test_zero_volatility_is_undefined(self):
        assert option_value(2000.0, 2000.0, 30.0, 0.0).condition == AnalyticsCondition.ZERO_VOLATILITY


class TestProbabilityOfProfit:
    def test_unbounded_break_evens_are_certain(self):
        assert probability_of_profit(None, None, 2000.0, 0.5).value == pytest.approx(1.0)

    def test_lower_break_even_at_spot_is_below_half(self):
        result = probability_of_profit(2000.0, None, 2000.0, 0.5)
        assert 0.0 < result.value < 0.5

    def test_wider_window_is_more_likely(self):
        narrow = probability_of_profit(1900.0, 2100.0, 2000.0, 0.5).value
        wide = probability_of_profit(1500.0, 2500.0, 2000.0, 0.5).value
        assert 0.0 <= narrow < wide <= 1.0

    def test_horizon_is_configurable(self):
        short = probability_of_profit(1500.0, 2500.0, 2000.0, 0.5, horizon_days=7).value
        long = probability_of_profit(1500.0, 2500.0, 2000.0, 0.5, horizon_days=90).value
        assert short > long

    def test_rejects_non_positive_horizon(self):
        with pytest.raises(ValueError):
            probability_of_profit(1500.0, 2500.0, 2000.0, 0.5, horizon_days=0)

    def test_zero_volatility_is_undefined(self):
        result = probability_of_profit(1500.0, 2500.0, 2000.0, 0.0)
        assert result.condition == AnalyticsCondition.ZERO_VOLATILITY
