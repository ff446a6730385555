from __future__ import annotations

from dataclasses import dataclass

from lp_analytics.domain.entities.analytics import AnalyticsSnapshot
from lp_analytics.domain.entities.position import TickLimits, TickRange


@dataclass(frozen=True)
class PreviewPositionInput:
    strike: float
    range_factor: float
    current_price: float
    fee_tier: int
    liquidity: int
    token0_decimals: int = 0
    token1_decimals: int = 0
    strike_steps: int = 0
    width_steps: int = 0
    daily_volume_usd: float | None = None
    total_value_locked_usd: float | None = None
    pool_liquidity: int | None = None
    token0_price_usd: float | None = None
    domain_min: float | None = None
    domain_max: float | None = None
    curve_points: int | None = None
    pop_horizon_days: float | None = None
    hedge_ratio: float = 0.0


@dataclass(frozen=True)
class PreviewPositionOutput:
    snapshot: AnalyticsSnapshot
    tick_range: TickRange
    tick_limits: TickLimits
