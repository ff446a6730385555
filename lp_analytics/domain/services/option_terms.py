from __future__ import annotations

import math

from lp_analytics.domain.entities.analytics import (
    AnalyticsCondition,
    MetricResult,
    OptionTerms,
)
from lp_analytics.domain.entities.position import PriceRange, TickRange
from lp_analytics.domain.exceptions import InvalidRangeError
from lp_analytics.domain.services.liquidity import decimal_scale
from lp_analytics.domain.services.univ3_math import (
    LOG_BASE,
    UNISWAP_V3_MAX_TICK,
    UNISWAP_V3_MIN_TICK,
    nearest_usable_tick,
    price_to_tick,
    range_from_ticks,
    tick_spacing_for_fee_tier,
)


def to_option_terms(price_range: PriceRange) -> OptionTerms:
    """Map a range to the strike and range factor of the replicating option.

    The strike is the geometric mean of the bounds and the range factor the
    square root of their ratio, so ``lower = strike / r`` and
    ``upper = strike * r``. A zero-width range has no range factor.
    """
    strike = math.sqrt(price_range.lower * price_range.upper)
    if price_range.is_degenerate:
        return OptionTerms(
            strike=strike,
            range_factor=MetricResult.unavailable(AnalyticsCondition.DEGENERATE_RANGE),
        )
    return OptionTerms(
        strike=strike,
        range_factor=MetricResult.of(math.sqrt(price_range.upper / price_range.lower)),
    )


def _usable_tick(price: float, tick_spacing: int, token0_decimals: int, token1_decimals: int) -> int:
    tick = price_to_tick(price, token0_decimals, token1_decimals)
    tick = min(max(tick, UNISWAP_V3_MIN_TICK), UNISWAP_V3_MAX_TICK)
    return nearest_usable_tick(tick, tick_spacing)


def range_from_option_terms(
    strike: float,
    range_factor: float,
    *,
    fee_tier: int,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> TickRange:
    """Design a range from option terms: ``lower = strike / r``, ``upper = strike * r``.

    Both bounds are snapped to the nearest usable tick of the fee tier, so the
    returned prices are the ones a mint would use. Snapping may collapse a very
    narrow range to zero width; it is returned as is and reported as
    ``DEGENERATE_RANGE`` by the analytics.
    """
    if not math.isfinite(strike) or strike <= 0:
        raise InvalidRangeError("strike must be positive and finite.")
    if not math.isfinite(range_factor) or range_factor < 1:
        raise ValueError("range_factor must be >= 1.")

    tick_spacing = tick_spacing_for_fee_tier(fee_tier)
    tick_lower = _usable_tick(strike / range_factor, tick_spacing, token0_decimals, token1_decimals)
    tick_upper = _usable_tick(strike * range_factor, tick_spacing, token0_decimals, token1_decimals)
    return TickRange(
        tick_lower=tick_lower,
        tick_upper=tick_upper,
        range=range_from_ticks(tick_lower, tick_upper, token0_decimals, token1_decimals),
    )


def shift_option_terms(
    strike: float,
    range_factor: float,
    *,
    fee_tier: int,
    strike_steps: int = 0,
    width_steps: int = 0,
) -> tuple[float, float]:
    """Move the strike and the range factor by whole tick-spacing steps.

    Negative ``width_steps`` narrow the range; the factor never drops below 1.
    """
    step = tick_spacing_for_fee_tier(fee_tier) * LOG_BASE
    shifted_strike = strike * math.exp(strike_steps * step)
    shifted_factor = max(range_factor * math.exp(width_steps * step), 1.0)
    return shifted_strike, shifted_factor


def capital_efficiency(range_factor: float) -> MetricResult:
    if range_factor < 1:
        raise ValueError("range_factor must be >= 1.")
    root = math.sqrt(range_factor)
    if root - 1 <= 0:
        return MetricResult.unavailable(AnalyticsCondition.DEGENERATE_RANGE)
    return MetricResult.of(root / (root - 1))


def option_notional(
    price_range: PriceRange,
    liquidity: int | float,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    """Token0 held by the position once price is at or below the range."""
    inverse_spread = 1 / math.sqrt(price_range.lower) - 1 / math.sqrt(price_range.upper)
    return liquidity * inverse_spread / decimal_scale(token0_decimals, token1_decimals)


def position_value(
    price_range: PriceRange,
    liquidity: int | float,
    price: float,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    """Quote-denominated value of the position at ``price``."""
    if price <= 0:
        raise ValueError("price must be positive.")
    notional = option_notional(
        price_range,
        liquidity,
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
    strike = math.sqrt(price_range.lower * price_range.upper)
    if price <= price_range.lower:
        return notional * price
    if price >= price_range.upper:
        return notional * strike

    r = math.sqrt(price_range.upper / price_range.lower)
    return notional * (2 * math.sqrt(strike * price * r) - strike - price) / (r - 1)


def base_value(
    price_range: PriceRange,
    liquidity: int | float,
    entry_price: float,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    return position_value(
        price_range,
        liquidity,
        entry_price,
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
