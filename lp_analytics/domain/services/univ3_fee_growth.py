from __future__ import annotations

import logging
from decimal import Decimal, localcontext

from lp_analytics.domain.entities.analytics import AnalyticsCondition, MetricResult
from lp_analytics.domain.entities.position import PoolSnapshot, Position, TickFeeState


Q128 = 2**128
UINT256_MOD = 2**256
# A delta in the upper half of the ring means the stored snapshot is ahead of
# the current accumulator rather than behind a wrap.
MAX_PLAUSIBLE_DELTA = 2**255
FEE_DECIMAL_PRECISION = 78
logger = logging.getLogger(__name__)


def sub_uint256(a: int, b: int) -> int:
    return (a - b) % UINT256_MOD


def parse_uint256(value: int | str | Decimal | None) -> int:
    if value is None:
        raise ValueError("Missing uint256 value.")
    if isinstance(value, bool):
        raise ValueError("Unsupported uint256 value type.")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Empty uint256 string.")
        parsed = int(raw, 0) if raw.lower().startswith("0x") else int(raw)
    elif isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError("Decimal uint256 value must be integral.")
        parsed = int(value)
    else:
        raise ValueError("Unsupported uint256 value type.")

    if parsed < 0:
        raise ValueError("uint256 value must be non-negative.")
    if parsed >= UINT256_MOD:
        raise ValueError("uint256 value out of range.")
    return parsed


def fee_growth_inside(
    *,
    fee_growth_global: int,
    fee_growth_outside_lower: int,
    fee_growth_outside_upper: int,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
) -> int:
    fee_growth_below = (
        fee_growth_outside_lower
        if tick_current >= tick_lower
        else sub_uint256(fee_growth_global, fee_growth_outside_lower)
    )
    fee_growth_above = (
        fee_growth_outside_upper
        if tick_current < tick_upper
        else sub_uint256(fee_growth_global, fee_growth_outside_upper)
    )
    return sub_uint256(
        sub_uint256(fee_growth_global, fee_growth_below),
        fee_growth_above,
    )


def fee_growth_delta(current_inside: int, inside_last: int) -> int:
    delta = current_inside - inside_last
    if delta < 0:
        delta += UINT256_MOD
    return delta


def fees_from_delta_inside(*, delta_inside: int, liquidity: int, token_decimals: int) -> Decimal:
    if delta_inside < 0:
        raise ValueError("delta_inside must be non-negative.")
    if liquidity < 0:
        raise ValueError("liquidity must be non-negative.")
    # Integer operands are exact, so the quotient is rounded once.
    with localcontext() as ctx:
        ctx.prec = FEE_DECIMAL_PRECISION
        return Decimal(liquidity * delta_inside) / Decimal(Q128 * 10**token_decimals)


def uncollected_fees(
    *,
    pool: PoolSnapshot,
    position: Position,
    lower_tick_state: TickFeeState,
    upper_tick_state: TickFeeState,
    token_index: int,
) -> MetricResult:
    if token_index == 0:
        fee_growth_global = pool.fee_growth_global0
        outside_lower = lower_tick_state.fee_growth_outside0
        outside_upper = upper_tick_state.fee_growth_outside0
        inside_last = position.fee_growth_inside0_last
        token_decimals = position.token0_decimals
    elif token_index == 1:
        fee_growth_global = pool.fee_growth_global1
        outside_lower = lower_tick_state.fee_growth_outside1
        outside_upper = upper_tick_state.fee_growth_outside1
        inside_last = position.fee_growth_inside1_last
        token_decimals = position.token1_decimals
    else:
        raise ValueError("token_index must be 0 or 1.")

    current_inside = fee_growth_inside(
        fee_growth_global=fee_growth_global,
        fee_growth_outside_lower=outside_lower,
        fee_growth_outside_upper=outside_upper,
        tick_current=pool.current_tick,
        tick_lower=position.tick_lower,
        tick_upper=position.tick_upper,
    )
    delta = fee_growth_delta(current_inside, inside_last)
    if delta >= MAX_PLAUSIBLE_DELTA:
        logger.warning(
            "fee_accrual: inconsistent fee growth clamped token=%s tick_lower=%s tick_upper=%s inside=%s inside_last=%s",
            token_index,
            position.tick_lower,
            position.tick_upper,
            current_inside,
            inside_last,
        )
        return MetricResult(
            value=Decimal("0"),
            condition=AnalyticsCondition.FEE_GROWTH_INCONSISTENCY,
        )

    return MetricResult.of(
        fees_from_delta_inside(
            delta_inside=delta,
            liquidity=position.liquidity,
            token_decimals=token_decimals,
        )
    )
