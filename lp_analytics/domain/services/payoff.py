from __future__ import annotations

from lp_analytics.domain.entities.analytics import (
    AnalyticsCondition,
    BreakEvenPoints,
    PayoffPoint,
    PriceDomain,
)
from lp_analytics.domain.entities.position import PriceRange
from lp_analytics.domain.services.option_terms import option_notional, position_value


DEFAULT_CURVE_POINTS = 193
DEFAULT_DOMAIN_MARGIN = 0.5


def default_price_domain(
    price_range: PriceRange,
    current_price: float,
    *,
    margin: float = DEFAULT_DOMAIN_MARGIN,
) -> PriceDomain:
    if margin < 0:
        raise ValueError("margin must be non-negative.")
    low = min(price_range.lower, current_price)
    high = max(price_range.upper, current_price)
    return PriceDomain(min=low / (1 + margin), max=high * (1 + margin))


def profit_loss(
    price_range: PriceRange,
    liquidity: int | float,
    price: float,
    *,
    entry_price: float,
    base: float,
    fees_accrued: float = 0.0,
    hedge_ratio: float = 0.0,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> float:
    value = position_value(
        price_range,
        liquidity,
        price,
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
    pnl = value + fees_accrued - base
    if hedge_ratio:
        notional = option_notional(
            price_range,
            liquidity,
            token0_decimals=token0_decimals,
            token1_decimals=token1_decimals,
        )
        pnl -= notional * hedge_ratio * (price - entry_price)
    return pnl


def generate_curve(
    price_range: PriceRange,
    liquidity: int | float,
    entry_price: float,
    fees_accrued: float,
    domain: PriceDomain,
    num_points: int = DEFAULT_CURVE_POINTS,
    *,
    hedge_ratio: float = 0.0,
    token0_decimals: int = 0,
    token1_decimals: int = 0,
) -> tuple[PayoffPoint, ...]:
    if num_points < 2:
        raise ValueError("num_points must be at least 2.")
    if domain.min <= 0 or domain.min >= domain.max:
        raise ValueError("domain must satisfy 0 < min < max.")
    if not 0 <= hedge_ratio <= 1:
        raise ValueError("hedge_ratio must be within [0, 1].")

    base = position_value(
        price_range,
        liquidity,
        entry_price,
        token0_decimals=token0_decimals,
        token1_decimals=token1_decimals,
    )
    step = (domain.max - domain.min) / (num_points - 1)
    points = []
    for index in range(num_points):
        price = domain.max if index == num_points - 1 else domain.min + step * index
        points.append(
            PayoffPoint(
                price=price,
                profit_loss=profit_loss(
                    price_range,
                    liquidity,
                    price,
                    entry_price=entry_price,
                    base=base,
                    fees_accrued=fees_accrued,
                    hedge_ratio=hedge_ratio,
                    token0_decimals=token0_decimals,
                    token1_decimals=token1_decimals,
                ),
            )
        )
    return tuple(points)


def _crossing_price(left: PayoffPoint, right: PayoffPoint) -> float:
    span = right.profit_loss - left.profit_loss
    if span == 0:
        return left.price
    weight = -left.profit_loss / span
    return left.price + (right.price - left.price) * weight


def break_even_points(curve: tuple[PayoffPoint, ...] | list[PayoffPoint]) -> BreakEvenPoints:
    """Locate where the curve enters and leaves its profitable region.

    ``low`` is the first loss-to-profit crossing scanning upward, ``high`` the
    last profit-to-loss crossing. A side stays ``None`` when the curve is
    already profitable at that edge of the domain. A curve that never changes
    sign reports ``NO_BREAK_EVEN_IN_DOMAIN``.
    """
    if len(curve) < 2:
        return BreakEvenPoints(
            low=None,
            high=None,
            condition=AnalyticsCondition.NO_BREAK_EVEN_IN_DOMAIN,
        )

    low = None
    high = None
    for left, right in zip(curve, curve[1:]):
        if left.profit_loss < 0 <= right.profit_loss and low is None:
            low = _crossing_price(left, right)
        elif left.profit_loss >= 0 > right.profit_loss:
            high = _crossing_price(left, right)

    if low is None and high is None:
        return BreakEvenPoints(
            low=None,
            high=None,
            condition=AnalyticsCondition.NO_BREAK_EVEN_IN_DOMAIN,
        )
    return BreakEvenPoints(low=low, high=high)
