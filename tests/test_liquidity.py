from __future__ import annotations

import math
from decimal import Decimal

import pytest

from lp_analytics.domain.entities.position import PriceRange, RangeStatus
from lp_analytics.domain.services.liquidity import (
    active_depth_tvl,
    amounts_at_price,
    entry_price_from_deposit,
    liquidity_from_deposit,
    range_status,
    token0_ratio,
)
from lp_analytics.domain.services.option_terms import position_value


RANGE = PriceRange(lower=1000.0, upper=4000.0)


class TestAmountsAtPrice:
    def test_inside_range_holds_both_tokens_and_matches_position_value(self):
        amounts = amounts_at_price(RANGE, 1, 2000.0, token0_decimals=18, token1_decimals=18)

        assert amounts.amount0 > 0
        assert amounts.amount1 > 0
        value = position_value(RANGE, 1, 2000.0, token0_decimals=18, token1_decimals=18)
        assert amounts.amount0 * 2000.0 + amounts.amount1 == pytest.approx(value, rel=1e-9)

    def test_below_range_holds_only_token0(self):
        amounts = amounts_at_price(RANGE, 1, 500.0)

        assert amounts.amount1 == 0
        assert amounts.amount0 == pytest.approx(1 / math.sqrt(1000.0) - 1 / math.sqrt(4000.0))

    def test_above_range_holds_only_token1(self):
        amounts = amounts_at_price(RANGE, 1, 5000.0)

        assert amounts.amount0 == 0
        assert amounts.amount1 == pytest.approx(math.sqrt(4000.0) - math.sqrt(1000.0))

    @pytest.mark.parametrize(
        "price,empty_side,held_side",
        [
            (RANGE.lower, "amount1", "amount0"),
            (RANGE.upper, "amount0", "amount1"),
        ],
    )
    def test_exact_bounds_hold_a_single_token(self, price, empty_side, held_side):
        amounts = amounts_at_price(RANGE, 10**6, price, token0_decimals=18, token1_decimals=6)

        assert getattr(amounts, empty_side) == 0
        assert getattr(amounts, held_side) > 0

    def test_decimals_scale_raw_amounts(self):
        raw = amounts_at_price(RANGE, 10**15, 2000.0)
        scaled = amounts_at_price(RANGE, 10**15, 2000.0, token0_decimals=18, token1_decimals=6)

        assert scaled.amount0 == pytest.approx(raw.amount0 / 1e12)
        assert scaled.amount1 == pytest.approx(raw.amount1 / 1e12)

    @pytest.mark.parametrize("price", [500.0, 2000.0, 5000.0])
    def test_amounts_value_matches_position_value_in_every_regime(self, price):
        amounts = amounts_at_price(RANGE, 10**6, price)
        assert amounts.amount0 * price + amounts.amount1 == pytest.approx(
            position_value(RANGE, 10**6, price), rel=1e-9
        )

    def test_rejects_negative_liquidity(self):
        with pytest.raises(ValueError):
            amounts_at_price(RANGE, -1, 2000.0)


class TestLiquidityFromDeposit:
    def test_recovers_liquidity_from_token0_side(self):
        amounts = amounts_at_price(RANGE, 10**6, 2000.0)
        liquidity = liquidity_from_deposit(RANGE, 2000.0, amounts.amount0, True)
        assert liquidity == pytest.approx(10**6, rel=1e-9)

    def test_recovers_liquidity_from_token1_side(self):
        amounts = amounts_at_price(RANGE, 10**6, 2000.0)
        liquidity = liquidity_from_deposit(RANGE, 2000.0, amounts.amount1, False)
        assert liquidity == pytest.approx(10**6, rel=1e-9)

    def test_boundary_price_contributes_zero_instead_of_dividing_by_zero(self):
        assert liquidity_from_deposit(RANGE, 1000.0, 5.0, False) == 0.0
        assert liquidity_from_deposit(RANGE, 4000.0, 5.0, True) == 0.0

    def test_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            liquidity_from_deposit(RANGE, 2000.0, -1.0, True)


class TestEntryPriceFromDeposit:
    def test_only_token0_deposited_means_lower_bound(self):
        assert entry_price_from_deposit(RANGE, 10**6, Decimal("1"), Decimal("0")) == 1000.0

    def test_only_token1_deposited_means_upper_bound(self):
        assert entry_price_from_deposit(RANGE, 10**6, Decimal("0"), Decimal("5")) == 4000.0

    def test_both_tokens_recover_deposit_price(self):
        amounts = amounts_at_price(RANGE, 10**6, 2500.0, token0_decimals=18, token1_decimals=6)
        entry = entry_price_from_deposit(
            RANGE,
            10**6,
            amounts.amount0,
            amounts.amount1,
            token0_decimals=18,
            token1_decimals=6,
        )
        assert entry == pytest.approx(2500.0, rel=1e-9)

    def test_entry_price_is_clamped_into_range(self):
        entry = entry_price_from_deposit(RANGE, 1, Decimal("1"), Decimal("1000000"))
        assert entry == 4000.0


class TestTokenRatioAndStatus:
    def test_token0_ratio_at_edges(self):
        assert token0_ratio(RANGE, 500.0) == 100
        assert token0_ratio(RANGE, 1000.0) == 100
        assert token0_ratio(RANGE, 4000.0) == 0
        assert token0_ratio(RANGE, 9000.0) == 0

    def test_token0_ratio_falls_as_price_rises(self):
        low = token0_ratio(RANGE, 1500.0)
        high = token0_ratio(RANGE, 3000.0)
        assert 0 < high < low < 100

    def test_range_status(self):
        assert range_status(tick_current=0, tick_lower=-10, tick_upper=10, liquidity=0) == RangeStatus.REMOVED
        assert range_status(tick_current=-11, tick_lower=-10, tick_upper=10, liquidity=1) == RangeStatus.BELOW_RANGE
        assert range_status(tick_current=10, tick_lower=-10, tick_upper=10, liquidity=1) == RangeStatus.ABOVE_RANGE
        assert range_status(tick_current=-10, tick_lower=-10, tick_upper=10, liquidity=1) == RangeStatus.IN_RANGE


class TestActiveDepthTvl:
    def test_is_positive_for_active_liquidity(self):
        tvl = active_depth_tvl(
            pool_liquidity=10**18,
            current_tick=0,
            fee_tier=3000,
            token_decimals=18,
            token_price_usd=2.0,
            token_index=0,
        )
        assert tvl > 0

    def test_scales_with_token_price(self):
        kwargs = {
            "pool_liquidity": 10**18,
            "current_tick": 1000,
            "fee_tier": 500,
            "token_decimals": 18,
            "token_index": 1,
        }
        assert active_depth_tvl(token_price_usd=4.0, **kwargs) == pytest.approx(
            2 * active_depth_tvl(token_price_usd=2.0, **kwargs)
        )

    def test_rejects_unknown_token_index(self):
        with pytest.raises(ValueError):
            active_depth_tvl(
                pool_liquidity=1,
                current_tick=0,
                fee_tier=3000,
                token_decimals=0,
                token_price_usd=1.0,
                token_index=2,
            )
