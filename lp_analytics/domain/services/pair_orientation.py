from __future__ import annotations

from dataclasses import replace

from lp_analytics.domain.entities.analytics import MetricResult
from lp_analytics.domain.entities.position import PriceRange, Position, TickLimits
from lp_analytics.domain.services.univ3_math import invert_price, normalize_range


def invert_price_range(price_range: PriceRange) -> PriceRange:
    return normalize_range(invert_price(price_range.upper), invert_price(price_range.lower))


def invert_tick_limits(limits: TickLimits) -> TickLimits:
    return TickLimits(lower=limits.upper, upper=limits.lower)


def swap_position_tokens(position: Position) -> Position:
    """Present ``position`` with token1 as the base token.

    Ticks and fee-growth snapshots keep their canonical orientation; only the
    price range and token-indexed amounts are mirrored.
    """
    return replace(
        position,
        range=invert_price_range(position.range),
        token0_decimals=position.token1_decimals,
        token1_decimals=position.token0_decimals,
        deposited_token0=position.deposited_token1,
        deposited_token1=position.deposited_token0,
        collected_fees_token0=position.collected_fees_token1,
        collected_fees_token1=position.collected_fees_token0,
    )


def swap_fee_results(
    fees0: MetricResult,
    fees1: MetricResult,
) -> tuple[MetricResult, MetricResult]:
    return fees1, fees0
