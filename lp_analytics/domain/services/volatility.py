from __future__ import annotations

import math

from lp_analytics.domain.entities.analytics import AnalyticsCondition, MetricResult
from lp_analytics.domain.entities.position import PriceRange


DAYS_PER_YEAR = 365
DEFAULT_POP_HORIZON_DAYS = 28
FEE_TIER_DENOMINATOR = 1_000_000


def implied_volatility(
    fee_tier: int,
    daily_volume_usd: float | None,
    tvl_usd: float | None,
) -> MetricResult:
    """Annualized volatility implied by fee income on the pool.

    Rough closed form from the fair-fee condition of a symmetric straddle:
    ``2 * fee_tier * sqrt(365 * volume / tvl) / 1e6`` with the fee tier in
    hundredths of a bip. An estimate, not a market-calibrated volatility.
    """
    if daily_volume_usd is None or tvl_usd is None or tvl_usd <= 0 or daily_volume_usd < 0:
        return MetricResult.unavailable(AnalyticsCondition.MISSING_MARKET_DATA)
    if fee_tier < 0:
        raise ValueError("fee_tier must be non-negative.")
    volatility = (
        2 * fee_tier * math.sqrt(DAYS_PER_YEAR * daily_volume_usd / tvl_usd)
    ) / FEE_TIER_DENOMINATOR
    return MetricResult.of(volatility)


def effective_dte_years(range_factor: float, volatility: float) -> float:
    if volatility <= 0:
        raise ValueError("volatility must be positive.")
    root = math.sqrt(range_factor)
    return (2 * math.pi / volatility**2) * (root - 1) ** 2 / (root + 1) ** 2


def effective_dte(
    range_factor: MetricResult,
    volatility: MetricResult,
    *,
    min_days: float = 1.0,
) -> MetricResult:
    if not range_factor.available:
        return MetricResult.unavailable(range_factor.condition)
    if not volatility.available:
        return MetricResult.unavailable(volatility.condition)
    if volatility.value == 0:
        return MetricResult.unavailable(AnalyticsCondition.ZERO_VOLATILITY)

    days = effective_dte_years(range_factor.value, volatility.value) * DAYS_PER_YEAR
    if days < min_days:
        return MetricResult.unavailable(AnalyticsCondition.BELOW_ONE_DAY)
    return MetricResult.of(days)


def _d1(price: float, strike: float, dte_years: float, volatility: float) -> float:
    vol_sqrt_t = volatility * math.sqrt(dte_years)
    return math.log(price / strike) / vol_sqrt_t + vol_sqrt_t


def delta(
    current_price: float,
    strike: float,
    dte_days: float,
    volatility: float,
    *,
    price_range: PriceRange | None = None,
) -> MetricResult:
    if price_range is not None:
        if current_price < price_range.lower:
            return MetricResult.of(0.0)
        if current_price > price_range.upper:
            return MetricResult.of(1.0)
    if volatility <= 0:
        return MetricResult.unavailable(AnalyticsCondition.ZERO_VOLATILITY)
    if dte_days <= 0:
        return MetricResult.unavailable(AnalyticsCondition.BELOW_ONE_DAY)

    d1 = _d1(current_price, strike, dte_days / DAYS_PER_YEAR, volatility)
    value = 0.5 - 0.5 * math.erf(d1 / math.sqrt(2))
    return MetricResult.of(min(max(value, 0.0), 1.0))


def option_value(
    current_price: float,
    strike: float,
    dte_days: float,
    volatility: float,
) -> MetricResult:
    if volatility <= 0:
        return MetricResult.unavailable(AnalyticsCondition.ZERO_VOLATILITY)
    if dte_days <= 0:
        return MetricResult.unavailable(AnalyticsCondition.BELOW_ONE_DAY)

    dte_years = dte_days / DAYS_PER_YEAR
    d1 = _d1(current_price, strike, dte_years, volatility)
    d2 = d1 - 2 * volatility * math.sqrt(dte_years)
    value = (
        current_price / 2
        + current_price * math.erf(d1 / math.sqrt(2)) / 2
        - strike / 2
        - strike * math.erf(d2 / math.sqrt(2)) / 2
    )
    return MetricResult.of(value)


def probability_of_profit(
    break_even_low: float | None,
    break_even_high: float | None,
    current_price: float,
    volatility: float,
    horizon_days: float = DEFAULT_POP_HORIZON_DAYS,
) -> MetricResult:
    """Lognormal probability that price ends between the break-even points.

    A missing lower bound integrates from zero, a missing upper bound to
    infinity.
    """
    if horizon_days <= 0:
        raise ValueError("horizon_days must be positive.")
    if current_price <= 0:
        raise ValueError("current_price must be positive.")
    if volatility <= 0:
        return MetricResult.unavailable(AnalyticsCondition.ZERO_VOLATILITY)

    horizon = horizon_days / DAYS_PER_YEAR
    denom = 2**1.5 * volatility * math.sqrt(horizon)

    def _cdf_term(bound: float) -> float:
        return math.erf((volatility**2 * horizon + 2 * math.log(bound / current_price)) / denom)

    low_term = -1.0 if break_even_low is None or break_even_low <= 0 else _cdf_term(break_even_low)
    high_term = 1.0 if break_even_high is None else _cdf_term(break_even_high)
    value = (high_term - low_term) / 2
    return MetricResult.of(min(max(value, 0.0), 1.0))
