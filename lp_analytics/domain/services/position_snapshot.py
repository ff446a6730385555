from __future__ import annotations

from lp_analytics.domain.entities.analytics import (
    AnalyticsCondition,
    AnalyticsSnapshot,
    MetricResult,
    PriceDomain,
)
from lp_analytics.domain.entities.position import (
    PoolSnapshot,
    Position,
    PriceRange,
    RangeStatus,
    TickFeeState,
)
from lp_analytics.domain.services.liquidity import (
    active_depth_tvl,
    amounts_at_price,
    entry_price_from_deposit,
    range_status,
    token0_ratio,
)
from lp_analytics.domain.services.option_terms import (
    base_value,
    capital_efficiency,
    position_value,
    to_option_terms,
)
from lp_analytics.domain.services.pair_orientation import swap_fee_results, swap_position_tokens
from lp_analytics.domain.services.payoff import (
    DEFAULT_CURVE_POINTS,
    DEFAULT_DOMAIN_MARGIN,
    break_even_points,
    default_price_domain,
    generate_curve,
    profit_loss,
)
from lp_analytics.domain.services.univ3_fee_growth import uncollected_fees
from lp_analytics.domain.services.univ3_math import invert_price
from lp_analytics.domain.services.volatility import (
    DAYS_PER_YEAR,
    DEFAULT_POP_HORIZON_DAYS,
    delta,
    effective_dte,
    effective_dte_years,
    implied_volatility,
    option_value,
    probability_of_profit,
)


_SWAPPED_STATUS = {
    RangeStatus.BELOW_RANGE: RangeStatus.ABOVE_RANGE,
    RangeStatus.ABOVE_RANGE: RangeStatus.BELOW_RANGE,
}


def _pool_tvl(pool: PoolSnapshot, token0_decimals: int) -> float | None:
    if pool.total_value_locked_usd is not None:
        return pool.total_value_locked_usd
    if pool.liquidity is None or pool.token0_price_usd is None:
        return None
    return active_depth_tvl(
        pool_liquidity=pool.liquidity,
        current_tick=pool.current_tick,
        fee_tier=pool.fee_tier,
        token_decimals=token0_decimals,
        token_price_usd=pool.token0_price_usd,
        token_index=0,
    )


def _greek_inputs(
    range_factor: MetricResult,
    volatility: MetricResult,
) -> tuple[float, float] | AnalyticsCondition:
    if not range_factor.available:
        return range_factor.condition
    if not volatility.available:
        return volatility.condition
    if volatility.value <= 0:
        return AnalyticsCondition.ZERO_VOLATILITY
    dte_days = effective_dte_years(range_factor.value, volatility.value) * DAYS_PER_YEAR
    return dte_days, volatility.value


def _position_delta(
    *,
    price_range: PriceRange,
    current_price: float,
    strike: float,
    greek_inputs: tuple[float, float] | AnalyticsCondition,
) -> MetricResult:
    if current_price < price_range.lower:
        return MetricResult.of(0.0)
    if current_price > price_range.upper:
        return MetricResult.of(1.0)
    if isinstance(greek_inputs, AnalyticsCondition):
        return MetricResult.unavailable(greek_inputs)
    dte_days, volatility = greek_inputs
    return delta(current_price, strike, dte_days, volatility, price_range=price_range)


def _expected_return(
    *,
    current_price: float,
    strike: float,
    greek_inputs: tuple[float, float] | AnalyticsCondition,
) -> MetricResult:
    if isinstance(greek_inputs, AnalyticsCondition):
        return MetricResult.unavailable(greek_inputs)
    dte_days, volatility = greek_inputs
    value = option_value(current_price, strike, dte_days, volatility)
    if not value.available:
        return value
    return MetricResult.of(value.value / current_price)


def build_position_analytics(
    *,
    pool: PoolSnapshot,
    position: Position,
    lower_tick_state: TickFeeState,
    upper_tick_state: TickFeeState,
    entry_price: float | None = None,
    domain: PriceDomain | None = None,
    num_points: int = DEFAULT_CURVE_POINTS,
    domain_margin: float = DEFAULT_DOMAIN_MARGIN,
    pop_horizon_days: float = DEFAULT_POP_HORIZON_DAYS,
    min_dte_days: float = 1.0,
    hedge_ratio: float = 0.0,
    swapped_pair: bool = False,
) -> AnalyticsSnapshot:
    """Compose every analytic of a position into one read-only snapshot.

    Fee accrual runs in canonical token order; everything after it is
    expressed in the requested quote direction. ``entry_price``, ``domain``
    and the returned prices all use that direction.
    """
    fees0 = uncollected_fees(
        pool=pool,
        position=position,
        lower_tick_state=lower_tick_state,
        upper_tick_state=upper_tick_state,
        token_index=0,
    )
    fees1 = uncollected_fees(
        pool=pool,
        position=position,
        lower_tick_state=lower_tick_state,
        upper_tick_state=upper_tick_state,
        token_index=1,
    )
    status = range_status(
        tick_current=pool.current_tick,
        tick_lower=position.tick_lower,
        tick_upper=position.tick_upper,
        liquidity=position.liquidity,
    )
    tvl = _pool_tvl(pool, position.token0_decimals)

    current_price = pool.current_price
    view = position
    if swapped_pair:
        view = swap_position_tokens(position)
        current_price = invert_price(current_price)
        fees0, fees1 = swap_fee_results(fees0, fees1)
        status = _SWAPPED_STATUS.get(status, status)

    price_range = view.range
    liquidity = view.liquidity
    decimals = {
        "token0_decimals": view.token0_decimals,
        "token1_decimals": view.token1_decimals,
    }

    if entry_price is None:
        entry_price = entry_price_from_deposit(
            price_range,
            liquidity,
            view.deposited_token0,
            view.deposited_token1,
            **decimals,
        )

    terms = to_option_terms(price_range)
    if terms.range_factor.available:
        efficiency = capital_efficiency(terms.range_factor.value)
    else:
        efficiency = MetricResult.unavailable(terms.range_factor.condition)

    amounts = amounts_at_price(price_range, liquidity, current_price, **decimals)
    value_now = position_value(price_range, liquidity, current_price, **decimals)
    base = base_value(price_range, liquidity, entry_price, **decimals)
    fees_value = float(fees0.value) * current_price + float(fees1.value)

    if view.removed:
        collected = float(view.collected_fees_token0) * current_price + float(view.collected_fees_token1)
        deposited = float(view.deposited_token0) * current_price + float(view.deposited_token1)
        pnl = collected - deposited
    else:
        pnl = profit_loss(
            price_range,
            liquidity,
            current_price,
            entry_price=entry_price,
            base=base,
            fees_accrued=fees_value,
            hedge_ratio=hedge_ratio,
            **decimals,
        )

    volatility = implied_volatility(pool.fee_tier, pool.daily_volume_usd, tvl)
    dte = effective_dte(terms.range_factor, volatility, min_days=min_dte_days)
    greek_inputs = _greek_inputs(terms.range_factor, volatility)
    position_delta = _position_delta(
        price_range=price_range,
        current_price=current_price,
        strike=terms.strike,
        greek_inputs=greek_inputs,
    )
    expected = _expected_return(
        current_price=current_price,
        strike=terms.strike,
        greek_inputs=greek_inputs,
    )

    if domain is None:
        domain = default_price_domain(price_range, current_price, margin=domain_margin)
    curve = generate_curve(
        price_range,
        liquidity,
        entry_price,
        fees_value,
        domain,
        num_points,
        hedge_ratio=hedge_ratio,
        **decimals,
    )
    break_even = break_even_points(curve)
    no_break_even = MetricResult.unavailable(AnalyticsCondition.NO_BREAK_EVEN_IN_DOMAIN)
    break_even_low = MetricResult.of(break_even.low) if break_even.low is not None else no_break_even
    break_even_high = MetricResult.of(break_even.high) if break_even.high is not None else no_break_even

    if break_even.condition is not None:
        pop = MetricResult.unavailable(break_even.condition)
    elif not volatility.available:
        pop = MetricResult.unavailable(volatility.condition)
    else:
        pop = probability_of_profit(
            break_even.low,
            break_even.high,
            current_price,
            volatility.value,
            pop_horizon_days,
        )

    return AnalyticsSnapshot(
        status=status,
        price_lower=price_range.lower,
        price_upper=price_range.upper,
        current_price=current_price,
        entry_price=entry_price,
        strike=terms.strike,
        range_factor=terms.range_factor,
        capital_efficiency=efficiency,
        implied_volatility=volatility,
        effective_dte=dte,
        delta=position_delta,
        probability_of_profit=pop,
        expected_return=expected,
        break_even_low=break_even_low,
        break_even_high=break_even_high,
        uncollected_fees0=fees0,
        uncollected_fees1=fees1,
        amount0=amounts.amount0,
        amount1=amounts.amount1,
        token0_ratio=token0_ratio(price_range, current_price),
        position_value=value_now,
        base_value=base,
        fees_value=fees_value,
        profit_loss=pnl,
        payoff_curve=curve,
    )
