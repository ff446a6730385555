from __future__ import annotations

import math

from lp_analytics.domain.entities.position import PriceRange, TickLimits
from lp_analytics.domain.exceptions import InvalidRangeError


LOG_BASE = math.log(1.0001)
UNISWAP_V3_MIN_TICK = -887272
UNISWAP_V3_MAX_TICK = 887272
FEE_TIER_TO_TICK_SPACING = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}


def tick_to_price(tick: int | float, token0_decimals: int, token1_decimals: int) -> float:
    decimal_adjust = 10 ** (token0_decimals - token1_decimals)
    return math.exp(float(tick) * LOG_BASE) * decimal_adjust


def price_to_tick(price: float, token0_decimals: int = 0, token1_decimals: int = 0) -> int:
    if not math.isfinite(price) or price <= 0:
        raise ValueError("price must be positive.")
    raw_price = price / (10 ** (token0_decimals - token1_decimals))
    return round(math.log(raw_price) / LOG_BASE)


def invert_price(price: float) -> float:
    if price <= 0:
        raise ValueError("price must be positive.")
    return 1.0 / price


def normalize_range(price_lower: float, price_upper: float) -> PriceRange:
    if price_lower > price_upper:
        price_lower, price_upper = price_upper, price_lower
    return PriceRange(lower=price_lower, upper=price_upper)


def range_from_ticks(
    tick_lower: int,
    tick_upper: int,
    token0_decimals: int,
    token1_decimals: int,
) -> PriceRange:
    if tick_lower > tick_upper:
        raise InvalidRangeError("tick_lower must not exceed tick_upper.")
    return normalize_range(
        tick_to_price(tick_lower, token0_decimals, token1_decimals),
        tick_to_price(tick_upper, token0_decimals, token1_decimals),
    )


def tick_spacing_for_fee_tier(fee_tier: int) -> int:
    tick_spacing = FEE_TIER_TO_TICK_SPACING.get(fee_tier)
    if tick_spacing is None:
        raise ValueError(f"Unsupported fee tier: {fee_tier}.")
    return tick_spacing


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    if tick_spacing <= 0:
        raise ValueError("tick_spacing must be positive.")
    rounded = round(tick / tick_spacing) * tick_spacing
    if rounded < UNISWAP_V3_MIN_TICK:
        return rounded + tick_spacing
    if rounded > UNISWAP_V3_MAX_TICK:
        return rounded - tick_spacing
    return rounded


def ticks_at_limit(fee_tier: int, tick_lower: int, tick_upper: int) -> TickLimits:
    tick_spacing = tick_spacing_for_fee_tier(fee_tier)
    return TickLimits(
        lower=tick_lower == nearest_usable_tick(UNISWAP_V3_MIN_TICK, tick_spacing),
        upper=tick_upper == nearest_usable_tick(UNISWAP_V3_MAX_TICK, tick_spacing),
    )
