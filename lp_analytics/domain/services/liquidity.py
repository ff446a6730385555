from __future__ import annotations

import math
from decimal import Decimal

from lp_analytics.domain.entities.position import PriceRange, RangeStatus, TokenAmounts
from lp_analytics.domain.services.univ3_math import LOG_BASE


def decimal_scale(token0_decimals: int, token1_decimals: int) -> float:
    # Raw liquidity over human prices: both token amounts share the halved exponent.
    return 10 ** ((token0_decimals + token1_decimals) / 2)


def amounts_at_price(
    price_range: PriceRange,
    liquidity: int | float,
    price: float,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> TokenAmounts:
    if liquidity < 0:
        raise ValueError("liquidity must be non-negative.")
    if price <= 0:
        raise ValueError("price must be positive.")

    scale = decimal_scale(token0_decimals, token1_decimals)
    sa = math.sqrt(price_range.lower)
    sb = math.sqrt(price_range.upper)

    if price <= price_range.lower:
        return TokenAmounts(amount0=liquidity * (1 / sa - 1 / sb) / scale, amount1=0.0)
    if price >= price_range.upper:
        return TokenAmounts(amount0=0.0, amount1=liquidity * (sb - sa) / scale)

    sp = math.sqrt(price)
    return TokenAmounts(
        amount0=liquidity * (1 / sp - 1 / sb) / scale,
        amount1=liquidity * (sp - sa) / scale,
    )


def liquidity_from_deposit(
    price_range: PriceRange,
    price: float,
    deposited_amount: float,
    is_token0: bool,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    """Solve the position formulas for liquidity given one side of the deposit.

    A price sitting exactly on the bound that empties the requested token
    contributes no liquidity instead of dividing by zero.
    """
    if deposited_amount < 0:
        raise ValueError("deposited_amount must be non-negative.")
    if price <= 0:
        raise ValueError("price must be positive.")

    amount_raw = deposited_amount * decimal_scale(token0_decimals, token1_decimals)
    sa = math.sqrt(price_range.lower)
    sb = math.sqrt(price_range.upper)

    if is_token0:
        if price >= price_range.upper:
            return 0.0
        sp = math.sqrt(max(price, price_range.lower))
        denom = 1 / sp - 1 / sb
        return amount_raw / denom if denom > 0 else 0.0

    if price <= price_range.lower:
        return 0.0
    sp = math.sqrt(min(price, price_range.upper))
    denom = sp - sa
    return amount_raw / denom if denom > 0 else 0.0


def entry_price_from_deposit(
    price_range: PriceRange,
    liquidity: int | float,
    deposited_token0: Decimal | float,
    deposited_token1: Decimal | float,
    *,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    deposited_token0 = float(deposited_token0)
    deposited_token1 = float(deposited_token1)
    if deposited_token1 <= 0:
        return price_range.lower
    if deposited_token0 <= 0:
        return price_range.upper
    if liquidity <= 0:
        return price_range.lower

    amount1_raw = deposited_token1 * decimal_scale(token0_decimals, token1_decimals)
    entry = (amount1_raw / liquidity + math.sqrt(price_range.lower)) ** 2
    return min(max(entry, price_range.lower), price_range.upper)


def token0_ratio(price_range: PriceRange, price: float) -> int:
    if price <= price_range.lower:
        return 100
    if price >= price_range.upper:
        return 0
    amounts = amounts_at_price(price_range, 1, price)
    value0 = amounts.amount0 * price
    total = value0 + amounts.amount1
    if total <= 0:
        return 0
    return math.floor(value0 / total * 100)


def range_status(
    *,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int | float,
) -> RangeStatus:
    if liquidity == 0:
        return RangeStatus.REMOVED
    if tick_current < tick_lower:
        return RangeStatus.BELOW_RANGE
    if tick_current >= tick_upper:
        return RangeStatus.ABOVE_RANGE
    return RangeStatus.IN_RANGE


def active_depth_tvl(
    *,
    pool_liquidity: int,
    current_tick: int,
    fee_tier: int,
    token_decimals: int,
    token_price_usd: float,
    token_index: int,
) -> float:
    """Value of the active liquidity within one fee band around the current tick."""
    if token_index not in (0, 1):
        raise ValueError("token_index must be 0 or 1.")
    half_band = fee_tier / 200
    tick = -current_tick if token_index == 0 else current_tick
    upper = math.exp((tick / 2 + half_band) * LOG_BASE)
    lower = math.exp((tick / 2 - half_band) * LOG_BASE)
    token_amount = pool_liquidity * (upper - lower) / 10**token_decimals
    return token_amount * token_price_usd
