from __future__ import annotations

import logging
import math
from time import perf_counter

from lp_analytics.application.dto.position_preview import PreviewPositionInput, PreviewPositionOutput
from lp_analytics.application.use_cases.get_position_analytics import (
    MAX_CURVE_POINTS,
    MAX_TOKEN_DECIMALS,
    MIN_CURVE_POINTS,
)
from lp_analytics.domain.entities.analytics import PriceDomain
from lp_analytics.domain.entities.position import PoolSnapshot, Position, TickFeeState
from lp_analytics.domain.exceptions import PositionAnalyticsInputError
from lp_analytics.domain.services.option_terms import range_from_option_terms, shift_option_terms
from lp_analytics.domain.services.payoff import DEFAULT_CURVE_POINTS, DEFAULT_DOMAIN_MARGIN
from lp_analytics.domain.services.position_snapshot import build_position_analytics
from lp_analytics.domain.services.univ3_math import (
    FEE_TIER_TO_TICK_SPACING,
    price_to_tick,
    ticks_at_limit,
)
from lp_analytics.domain.services.volatility import DEFAULT_POP_HORIZON_DAYS


MAX_SHIFT_STEPS = 1000
logger = logging.getLogger(__name__)

_NO_FEES = TickFeeState(fee_growth_outside0=0, fee_growth_outside1=0)


class PreviewPositionUseCase:
    """Analytics of a range designed from option terms, before any deposit.

    The position is opened at the current price with no accrued fees, so the
    payoff is zero at the current price.
    """

    def __init__(
        self,
        *,
        curve_points: int = DEFAULT_CURVE_POINTS,
        pop_horizon_days: float = DEFAULT_POP_HORIZON_DAYS,
        domain_margin: float = DEFAULT_DOMAIN_MARGIN,
        min_dte_days: float = 1.0,
    ):
        self._curve_points = curve_points
        self._pop_horizon_days = pop_horizon_days
        self._domain_margin = domain_margin
        self._min_dte_days = min_dte_days

    def execute(self, command: PreviewPositionInput) -> PreviewPositionOutput:
        started_at = perf_counter()
        logger.info(
            "position_preview: start strike=%s range_factor=%s fee_tier=%s strike_steps=%s width_steps=%s",
            command.strike,
            command.range_factor,
            command.fee_tier,
            command.strike_steps,
            command.width_steps,
        )
        self._validate(command)

        curve_points = command.curve_points if command.curve_points is not None else self._curve_points
        pop_horizon_days = (
            command.pop_horizon_days if command.pop_horizon_days is not None else self._pop_horizon_days
        )
        domain = None
        if command.domain_min is not None and command.domain_max is not None:
            domain = PriceDomain(min=command.domain_min, max=command.domain_max)

        try:
            strike, range_factor = shift_option_terms(
                command.strike,
                command.range_factor,
                fee_tier=command.fee_tier,
                strike_steps=command.strike_steps,
                width_steps=command.width_steps,
            )
            tick_range = range_from_option_terms(
                strike,
                range_factor,
                fee_tier=command.fee_tier,
                token0_decimals=command.token0_decimals,
                token1_decimals=command.token1_decimals,
            )
            pool = PoolSnapshot(
                current_price=command.current_price,
                current_tick=price_to_tick(
                    command.current_price,
                    command.token0_decimals,
                    command.token1_decimals,
                ),
                fee_tier=command.fee_tier,
                daily_volume_usd=command.daily_volume_usd,
                total_value_locked_usd=command.total_value_locked_usd,
                liquidity=command.pool_liquidity,
                token0_price_usd=command.token0_price_usd,
            )
            position = Position(
                tick_lower=tick_range.tick_lower,
                tick_upper=tick_range.tick_upper,
                range=tick_range.range,
                liquidity=command.liquidity,
                token0_decimals=command.token0_decimals,
                token1_decimals=command.token1_decimals,
            )
            snapshot = build_position_analytics(
                pool=pool,
                position=position,
                lower_tick_state=_NO_FEES,
                upper_tick_state=_NO_FEES,
                entry_price=command.current_price,
                domain=domain,
                num_points=curve_points,
                domain_margin=self._domain_margin,
                pop_horizon_days=pop_horizon_days,
                min_dte_days=self._min_dte_days,
                hedge_ratio=command.hedge_ratio,
            )
        except (ValueError, OverflowError) as exc:
            raise PositionAnalyticsInputError(str(exc)) from exc

        tick_limits = ticks_at_limit(command.fee_tier, tick_range.tick_lower, tick_range.tick_upper)
        logger.info(
            "position_preview: done tick_lower=%s tick_upper=%s status=%s elapsed_ms=%.2f",
            tick_range.tick_lower,
            tick_range.tick_upper,
            snapshot.status.value,
            (perf_counter() - started_at) * 1000,
        )
        return PreviewPositionOutput(snapshot=snapshot, tick_range=tick_range, tick_limits=tick_limits)

    @staticmethod
    def _validate(command: PreviewPositionInput) -> None:
        for name, decimals in (
            ("token0_decimals", command.token0_decimals),
            ("token1_decimals", command.token1_decimals),
        ):
            if decimals < 0 or decimals > MAX_TOKEN_DECIMALS:
                raise PositionAnalyticsInputError(f"{name} must be between 0 and {MAX_TOKEN_DECIMALS}.")
        if command.fee_tier not in FEE_TIER_TO_TICK_SPACING:
            raise PositionAnalyticsInputError(
                f"fee_tier must be one of: {', '.join(str(tier) for tier in FEE_TIER_TO_TICK_SPACING)}."
            )
        if not math.isfinite(command.strike) or command.strike <= 0:
            raise PositionAnalyticsInputError("strike must be positive.")
        if not math.isfinite(command.range_factor) or command.range_factor < 1:
            raise PositionAnalyticsInputError("range_factor must be >= 1.")
        if not math.isfinite(command.current_price) or command.current_price <= 0:
            raise PositionAnalyticsInputError("current_price must be positive.")
        if command.liquidity <= 0:
            raise PositionAnalyticsInputError("liquidity must be > 0.")
        for name, steps in (
            ("strike_steps", command.strike_steps),
            ("width_steps", command.width_steps),
        ):
            if abs(steps) > MAX_SHIFT_STEPS:
                raise PositionAnalyticsInputError(f"{name} must be between -{MAX_SHIFT_STEPS} and {MAX_SHIFT_STEPS}.")
        if command.curve_points is not None and not (
            MIN_CURVE_POINTS <= command.curve_points <= MAX_CURVE_POINTS
        ):
            raise PositionAnalyticsInputError(
                f"curve_points must be between {MIN_CURVE_POINTS} and {MAX_CURVE_POINTS}."
            )
        if command.pop_horizon_days is not None and command.pop_horizon_days <= 0:
            raise PositionAnalyticsInputError("pop_horizon_days must be > 0.")
        if not 0 <= command.hedge_ratio <= 1:
            raise PositionAnalyticsInputError("hedge_ratio must be within [0, 1].")
        if (command.domain_min is None) != (command.domain_max is None):
            raise PositionAnalyticsInputError("domain_min and domain_max must be provided together.")
        if command.domain_min is not None and not 0 < command.domain_min < command.domain_max:
            raise PositionAnalyticsInputError("domain must satisfy 0 < domain_min < domain_max.")
