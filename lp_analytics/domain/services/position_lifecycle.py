from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from lp_analytics.domain.entities.position import Position


def apply_liquidity_change(
    position: Position,
    *,
    liquidity_delta: int,
    fee_growth_inside0: int,
    fee_growth_inside1: int,
    amount_token0: Decimal = Decimal("0"),
    amount_token1: Decimal = Decimal("0"),
) -> Position:
    """Snapshot after an increase (positive delta) or decrease of liquidity.

    Increases add to the deposited amounts; decreases leave them untouched.
    Both refresh the fee-growth checkpoints.
    """
    liquidity = position.liquidity + liquidity_delta
    if liquidity < 0:
        raise ValueError("liquidity cannot become negative.")
    deposited0 = position.deposited_token0
    deposited1 = position.deposited_token1
    if liquidity_delta > 0:
        deposited0 += amount_token0
        deposited1 += amount_token1
    return replace(
        position,
        liquidity=liquidity,
        fee_growth_inside0_last=fee_growth_inside0,
        fee_growth_inside1_last=fee_growth_inside1,
        deposited_token0=deposited0,
        deposited_token1=deposited1,
    )


def apply_collect(
    position: Position,
    *,
    amount_token0: Decimal,
    amount_token1: Decimal,
) -> Position:
    if amount_token0 < 0 or amount_token1 < 0:
        raise ValueError("collected amounts must be non-negative.")
    return replace(
        position,
        collected_fees_token0=position.collected_fees_token0 + amount_token0,
        collected_fees_token1=position.collected_fees_token1 + amount_token1,
    )
