from __future__ import annotations

import logging
from decimal import Decimal
from time import perf_counter

from lp_analytics.application.dto.position_analytics import (
    GetPositionAnalyticsInput,
    GetPositionAnalyticsOutput,
)
from lp_analytics.application.ports.fee_snapshot_port import FeeSnapshotPort
from lp_analytics.domain.entities.analytics import PriceDomain
from lp_analytics.domain.entities.fee_snapshot import FeeSnapshot
from lp_analytics.domain.entities.position import PoolSnapshot, Position, TickFeeState
from lp_analytics.domain.exceptions import PositionAnalyticsInputError
from lp_analytics.domain.services.pair_orientation import invert_tick_limits
from lp_analytics.domain.services.payoff import DEFAULT_CURVE_POINTS, DEFAULT_DOMAIN_MARGIN
from lp_analytics.domain.services.position_snapshot import build_position_analytics
from lp_analytics.domain.services.univ3_fee_growth import parse_uint256
from lp_analytics.domain.services.univ3_math import (
    FEE_TIER_TO_TICK_SPACING,
    UNISWAP_V3_MAX_TICK,
    UNISWAP_V3_MIN_TICK,
    range_from_ticks,
    tick_to_price,
    ticks_at_limit,
)
from lp_analytics.domain.services.volatility import DEFAULT_POP_HORIZON_DAYS


MAX_TOKEN_DECIMALS = 36
MIN_CURVE_POINTS = 2
MAX_CURVE_POINTS = 2000
logger = logging.getLogger(__name__)


class GetPositionAnalyticsUseCase:
    def __init__(
        self,
        *,
        fee_snapshot_port: FeeSnapshotPort | None = None,
        curve_points: int = DEFAULT_CURVE_POINTS,
        pop_horizon_days: float = DEFAULT_POP_HORIZON_DAYS,
        domain_margin: float = DEFAULT_DOMAIN_MARGIN,
        min_dte_days: float = 1.0,
    ):
        self._fee_snapshot_port = fee_snapshot_port
        self._curve_points = curve_points
        self._pop_horizon_days = pop_horizon_days
        self._domain_margin = domain_margin
        self._min_dte_days = min_dte_days

    def execute(self, command: GetPositionAnalyticsInput) -> GetPositionAnalyticsOutput:
        started_at = perf_counter()
        logger.info(
            "position_analytics: start position_id=%s tick_lower=%s tick_upper=%s current_tick=%s fee_tier=%s swapped_pair=%s",
            command.position_id,
            command.tick_lower,
            command.tick_upper,
            command.current_tick,
            command.fee_tier,
            command.swapped_pair,
        )
        self._validate(command)

        curve_points = command.curve_points if command.curve_points is not None else self._curve_points
        pop_horizon_days = (
            command.pop_horizon_days if command.pop_horizon_days is not None else self._pop_horizon_days
        )

        try:
            pool, position, lower_state, upper_state = self._build_entities(command)
            snapshot = build_position_analytics(
                pool=pool,
                position=position,
                lower_tick_state=lower_state,
                upper_tick_state=upper_state,
                entry_price=command.entry_price,
                domain=self._domain(command),
                num_points=curve_points,
                domain_margin=self._domain_margin,
                pop_horizon_days=pop_horizon_days,
                min_dte_days=self._min_dte_days,
                hedge_ratio=command.hedge_ratio,
                swapped_pair=command.swapped_pair,
            )
        except ValueError as exc:
            raise PositionAnalyticsInputError(str(exc)) from exc

        tick_limits = ticks_at_limit(command.fee_tier, command.tick_lower, command.tick_upper)
        fees_token0 = snapshot.uncollected_fees0.value
        fees_token1 = snapshot.uncollected_fees1.value
        if command.swapped_pair:
            tick_limits = invert_tick_limits(tick_limits)
            # Stored snapshots always use canonical token order.
            fees_token0, fees_token1 = fees_token1, fees_token0

        previous = self._record_fee_snapshot(
            command,
            fees_token0=fees_token0,
            fees_token1=fees_token1,
        )

        logger.info(
            "position_analytics: done position_id=%s status=%s points=%s elapsed_ms=%.2f",
            command.position_id,
            snapshot.status.value,
            len(snapshot.payoff_curve),
            (perf_counter() - started_at) * 1000,
        )
        return GetPositionAnalyticsOutput(
            snapshot=snapshot,
            tick_limits=tick_limits,
            previous_fee_snapshot=previous,
        )

    @staticmethod
    def _validate(command: GetPositionAnalyticsInput) -> None:
        for name, decimals in (
            ("token0_decimals", command.token0_decimals),
            ("token1_decimals", command.token1_decimals),
        ):
            if decimals < 0 or decimals > MAX_TOKEN_DECIMALS:
                raise PositionAnalyticsInputError(f"{name} must be between 0 and {MAX_TOKEN_DECIMALS}.")
        if command.tick_lower >= command.tick_upper:
            raise PositionAnalyticsInputError("tick_lower must be lower than tick_upper.")
        if command.tick_lower < UNISWAP_V3_MIN_TICK or command.tick_upper > UNISWAP_V3_MAX_TICK:
            raise PositionAnalyticsInputError("ticks must be within the Uniswap v3 tick bounds.")
        if command.fee_tier not in FEE_TIER_TO_TICK_SPACING:
            raise PositionAnalyticsInputError(
                f"fee_tier must be one of: {', '.join(str(tier) for tier in FEE_TIER_TO_TICK_SPACING)}."
            )
        if command.liquidity < 0:
            raise PositionAnalyticsInputError("liquidity must be >= 0.")
        for name, amount in (
            ("deposited_token0", command.deposited_token0),
            ("deposited_token1", command.deposited_token1),
            ("collected_fees_token0", command.collected_fees_token0),
            ("collected_fees_token1", command.collected_fees_token1),
        ):
            if amount < 0:
                raise PositionAnalyticsInputError(f"{name} must be >= 0.")
        if command.current_price is not None and command.current_price <= 0:
            raise PositionAnalyticsInputError("current_price must be positive.")
        if command.entry_price is not None and command.entry_price <= 0:
            raise PositionAnalyticsInputError("entry_price must be positive.")
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
        if command.block_number is not None and command.block_number < 0:
            raise PositionAnalyticsInputError("block_number must be >= 0.")

    @staticmethod
    def _build_entities(
        command: GetPositionAnalyticsInput,
    ) -> tuple[PoolSnapshot, Position, TickFeeState, TickFeeState]:
        current_price = command.current_price
        if current_price is None:
            current_price = tick_to_price(
                command.current_tick,
                command.token0_decimals,
                command.token1_decimals,
            )
        pool = PoolSnapshot(
            current_price=current_price,
            current_tick=command.current_tick,
            fee_tier=command.fee_tier,
            fee_growth_global0=parse_uint256(command.fee_growth_global0),
            fee_growth_global1=parse_uint256(command.fee_growth_global1),
            daily_volume_usd=command.daily_volume_usd,
            total_value_locked_usd=command.total_value_locked_usd,
            liquidity=command.pool_liquidity,
            token0_price_usd=command.token0_price_usd,
        )
        position = Position(
            tick_lower=command.tick_lower,
            tick_upper=command.tick_upper,
            range=range_from_ticks(
                command.tick_lower,
                command.tick_upper,
                command.token0_decimals,
                command.token1_decimals,
            ),
            liquidity=command.liquidity,
            token0_decimals=command.token0_decimals,
            token1_decimals=command.token1_decimals,
            fee_growth_inside0_last=parse_uint256(command.fee_growth_inside0_last),
            fee_growth_inside1_last=parse_uint256(command.fee_growth_inside1_last),
            deposited_token0=command.deposited_token0,
            deposited_token1=command.deposited_token1,
            collected_fees_token0=command.collected_fees_token0,
            collected_fees_token1=command.collected_fees_token1,
        )
        lower_state = TickFeeState(
            fee_growth_outside0=parse_uint256(command.fee_growth_outside_lower0),
            fee_growth_outside1=parse_uint256(command.fee_growth_outside_lower1),
        )
        upper_state = TickFeeState(
            fee_growth_outside0=parse_uint256(command.fee_growth_outside_upper0),
            fee_growth_outside1=parse_uint256(command.fee_growth_outside_upper1),
        )
        return pool, position, lower_state, upper_state

    @staticmethod
    def _domain(command: GetPositionAnalyticsInput) -> PriceDomain | None:
        if command.domain_min is None or command.domain_max is None:
            return None
        return PriceDomain(min=command.domain_min, max=command.domain_max)

    def _record_fee_snapshot(
        self,
        command: GetPositionAnalyticsInput,
        *,
        fees_token0: Decimal,
        fees_token1: Decimal,
    ) -> FeeSnapshot | None:
        if self._fee_snapshot_port is None:
            return None
        if command.position_id is None or command.block_number is None:
            return None
        previous = self._fee_snapshot_port.get_latest_fee_snapshot(position_id=command.position_id)
        self._fee_snapshot_port.save_fee_snapshot(
            FeeSnapshot(
                position_id=command.position_id,
                block_number=command.block_number,
                fees_token0=fees_token0,
                fees_token1=fees_token1,
            )
        )
        return previous
