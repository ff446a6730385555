from __future__ import annotations

import math

import pytest

from lp_analytics.domain.entities.analytics import AnalyticsCondition
from lp_analytics.domain.entities.position import PriceRange
from lp_analytics.domain.exceptions import InvalidRangeError
from lp_analytics.domain.services.liquidity import amounts_at_price
from lp_analytics.domain.services.option_terms import (
    base_value,
    capital_efficiency,
    option_notional,
    position_value,
    range_from_option_terms,
    shift_option_terms,
    to_option_terms,
)
from lp_analytics.domain.services.univ3_math import UNISWAP_V3_MAX_TICK, UNISWAP_V3_MIN_TICK


RANGE = PriceRange(lower=1000.0, upper=4000.0)


def test_strike_and_range_factor_for_symmetric_range():
    terms = to_option_terms(RANGE)

    assert terms.strike == 2000.0
    assert terms.range_factor.value == 2.0
    assert terms.range_factor.condition is None


def test_range_bounds_are_strike_over_and_times_range_factor():
    terms = to_option_terms(PriceRange(lower=1500.0, upper=2600.0))
    assert terms.strike / terms.range_factor.value == pytest.approx(1500.0)
    assert terms.strike * terms.range_factor.value == pytest.approx(2600.0)


def test_zero_width_range_reports_degenerate_instead_of_infinity():
    terms = to_option_terms(PriceRange(lower=2000.0, upper=2000.0))

    assert terms.strike == 2000.0
    assert terms.range_factor.value is None
    assert terms.range_factor.condition == AnalyticsCondition.DEGENERATE_RANGE


def test_capital_efficiency():
    result = capital_efficiency(4.0)
    assert result.value == pytest.approx(2.0 / (2.0 - 1.0))


def test_capital_efficiency_is_undefined_for_unit_range_factor():
    result = capital_efficiency(1.0)
    assert result.value is None
    assert result.condition == AnalyticsCondition.DEGENERATE_RANGE


def test_capital_efficiency_rejects_range_factor_below_one():
    with pytest.raises(ValueError):
        capital_efficiency(0.5)


def test_option_notional_is_token0_held_below_range():
    notional = option_notional(RANGE, 10**6)
    below = amounts_at_price(RANGE, 10**6, 500.0)
    assert notional == pytest.approx(below.amount0)


def test_option_notional_applies_decimal_scale():
    assert option_notional(RANGE, 10**18, token0_decimals=18, token1_decimals=18) == pytest.approx(
        1 / math.sqrt(1000.0) - 1 / math.sqrt(4000.0)
    )


def test_position_value_regimes():
    notional = option_notional(RANGE, 10**6)

    assert position_value(RANGE, 10**6, 500.0) == pytest.approx(notional * 500.0)
    assert position_value(RANGE, 10**6, 8000.0) == pytest.approx(notional * 2000.0)
    assert position_value(RANGE, 10**6, 1000.0) == pytest.approx(notional * 1000.0)
    assert position_value(RANGE, 10**6, 4000.0) == pytest.approx(notional * 2000.0)


def test_position_value_is_continuous_at_bounds():
    just_inside = position_value(RANGE, 10**6, 1000.0 * (1 + 1e-9))
    at_bound = position_value(RANGE, 10**6, 1000.0)
    assert just_inside == pytest.approx(at_bound, rel=1e-6)


def test_base_value_is_position_value_at_entry():
    assert base_value(RANGE, 10**6, 2500.0) == position_value(RANGE, 10**6, 2500.0)


def test_position_value_rejects_non_positive_price():
    with pytest.raises(ValueError):
        position_value(RANGE, 1, 0.0)


class TestRangeFromOptionTerms:
    def test_bounds_are_snapped_to_usable_ticks(self):
        designed = range_from_option_terms(2000.0, 2.0, fee_tier=3000)

        assert designed.tick_lower % 60 == 0
        assert designed.tick_upper % 60 == 0
        assert designed.tick_lower < designed.tick_upper
        assert designed.range.lower == pytest.approx(1000.0, rel=0.01)
        assert designed.range.upper == pytest.approx(4000.0, rel=0.01)

    def test_designed_range_maps_back_to_its_terms(self):
        designed = range_from_option_terms(2000.0, 1.5, fee_tier=500)
        terms = to_option_terms(designed.range)

        assert terms.strike == pytest.approx(2000.0, rel=1e-3)
        assert terms.range_factor.value == pytest.approx(1.5, rel=1e-3)

    def test_decimals_shift_ticks(self):
        plain = range_from_option_terms(2000.0, 2.0, fee_tier=3000)
        scaled = range_from_option_terms(
            2000.0, 2.0, fee_tier=3000, token0_decimals=18, token1_decimals=6
        )

        assert scaled.tick_lower != plain.tick_lower
        assert scaled.range.lower == pytest.approx(plain.range.lower, rel=0.02)

    def test_unit_range_factor_collapses_to_zero_width(self):
        designed = range_from_option_terms(2000.0, 1.0, fee_tier=3000)

        assert designed.tick_lower == designed.tick_upper
        assert designed.range.is_degenerate
        assert to_option_terms(designed.range).range_factor.condition == AnalyticsCondition.DEGENERATE_RANGE

    def test_extreme_range_factor_is_clamped_to_tick_bounds(self):
        designed = range_from_option_terms(1.0, 1e300, fee_tier=3000)

        assert UNISWAP_V3_MIN_TICK <= designed.tick_lower
        assert designed.tick_upper <= UNISWAP_V3_MAX_TICK
        assert designed.tick_lower == -887220
        assert designed.tick_upper == 887220

    @pytest.mark.parametrize("range_factor", [0.5, 0.0, -2.0, math.inf, math.nan])
    def test_rejects_range_factor_below_one(self, range_factor):
        with pytest.raises(ValueError):
            range_from_option_terms(2000.0, range_factor, fee_tier=3000)

    @pytest.mark.parametrize("strike", [0.0, -1.0, math.inf])
    def test_rejects_non_positive_strike(self, strike):
        with pytest.raises(InvalidRangeError):
            range_from_option_terms(strike, 2.0, fee_tier=3000)

    def test_rejects_unknown_fee_tier(self):
        with pytest.raises(ValueError):
            range_from_option_terms(2000.0, 2.0, fee_tier=123)


class TestShiftOptionTerms:
    def test_one_strike_step_moves_by_one_tick_spacing(self):
        strike, range_factor = shift_option_terms(2000.0, 2.0, fee_tier=3000, strike_steps=1)

        assert strike == pytest.approx(2000.0 * 1.0001**60)
        assert range_factor == 2.0

    def test_width_steps_widen_and_narrow(self):
        _, wider = shift_option_terms(2000.0, 2.0, fee_tier=500, width_steps=10)
        _, narrower = shift_option_terms(2000.0, 2.0, fee_tier=500, width_steps=-10)

        assert wider == pytest.approx(2.0 * 1.0001**100)
        assert narrower == pytest.approx(2.0 / 1.0001**100)

    def test_range_factor_never_drops_below_one(self):
        _, range_factor = shift_option_terms(2000.0, 1.01, fee_tier=10000, width_steps=-50)
        assert range_factor == 1.0
