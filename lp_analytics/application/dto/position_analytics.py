from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_analytics.domain.entities.analytics import AnalyticsSnapshot
from lp_analytics.domain.entities.position import TickLimits
from lp_analytics.domain.entities.fee_snapshot import FeeSnapshot


@dataclass(frozen=True)
class GetPositionAnalyticsInput:
    tick_lower: int
    tick_upper: int
    liquidity: int
    token0_decimals: int
    token1_decimals: int
    current_tick: int
    fee_tier: int
    fee_growth_global0: int | str
    fee_growth_global1: int | str
    fee_growth_outside_lower0: int | str
    fee_growth_outside_lower1: int | str
    fee_growth_outside_upper0: int | str
    fee_growth_outside_upper1: int | str
    fee_growth_inside0_last: int | str
    fee_growth_inside1_last: int | str
    current_price: float | None = None
    deposited_token0: Decimal = Decimal("0")
    deposited_token1: Decimal = Decimal("0")
    collected_fees_token0: Decimal = Decimal("0")
    collected_fees_token1: Decimal = Decimal("0")
    daily_volume_usd: float | None = None
    total_value_locked_usd: float | None = None
    pool_liquidity: int | None = None
    token0_price_usd: float | None = None
    entry_price: float | None = None
    domain_min: float | None = None
    domain_max: float | None = None
    curve_points: int | None = None
    pop_horizon_days: float | None = None
    hedge_ratio: float = 0.0
    swapped_pair: bool = False
    position_id: str | None = None
    block_number: int | None = None


@dataclass(frozen=True)
class GetPositionAnalyticsOutput:
    snapshot: AnalyticsSnapshot
    tick_limits: TickLimits
    previous_fee_snapshot: FeeSnapshot | None
