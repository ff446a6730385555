from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class PositionAnalyticsRequest(BaseModel):
    tick_lower: int = Field(..., description="Lower tick of the position.")
    tick_upper: int = Field(..., description="Upper tick of the position.")
    liquidity: int = Field(..., ge=0, description="Raw position liquidity (uint128).")
    token0_decimals: int = Field(..., ge=0, le=36, description="Decimals of token0.")
    token1_decimals: int = Field(..., ge=0, le=36, description="Decimals of token1.")
    current_tick: int = Field(..., description="Current pool tick.")
    current_price: float | None = Field(
        None,
        gt=0,
        description="Current price token1/token0. Derived from current_tick when omitted.",
    )
    fee_tier: int = Field(..., description="Pool fee tier in hundredths of a bip (100, 500, 3000, 10000).")

    fee_growth_global0: int | str = Field(..., description="feeGrowthGlobal0X128 (uint256).")
    fee_growth_global1: int | str = Field(..., description="feeGrowthGlobal1X128 (uint256).")
    fee_growth_outside_lower0: int | str = Field(..., description="feeGrowthOutside0X128 of tick_lower.")
    fee_growth_outside_lower1: int | str = Field(..., description="feeGrowthOutside1X128 of tick_lower.")
    fee_growth_outside_upper0: int | str = Field(..., description="feeGrowthOutside0X128 of tick_upper.")
    fee_growth_outside_upper1: int | str = Field(..., description="feeGrowthOutside1X128 of tick_upper.")
    fee_growth_inside0_last: int | str = Field(..., description="Position feeGrowthInside0LastX128.")
    fee_growth_inside1_last: int | str = Field(..., description="Position feeGrowthInside1LastX128.")

    deposited_token0: Decimal = Field(Decimal("0"), ge=0, description="Token0 deposited, in token units.")
    deposited_token1: Decimal = Field(Decimal("0"), ge=0, description="Token1 deposited, in token units.")
    collected_fees_token0: Decimal = Field(Decimal("0"), ge=0, description="Token0 fees already collected.")
    collected_fees_token1: Decimal = Field(Decimal("0"), ge=0, description="Token1 fees already collected.")

    daily_volume_usd: float | None = Field(None, ge=0, description="Pool volume over the last 24h in USD.")
    total_value_locked_usd: float | None = Field(None, ge=0, description="Pool TVL in USD.")
    pool_liquidity: int | None = Field(None, ge=0, description="Active pool liquidity, used when TVL is missing.")
    token0_price_usd: float | None = Field(None, ge=0, description="USD price of token0, used when TVL is missing.")

    entry_price: float | None = Field(
        None,
        gt=0,
        description="Entry price; recovered from the deposited amounts when omitted.",
    )
    domain_min: float | None = Field(None, gt=0, description="Lowest price of the payoff curve.")
    domain_max: float | None = Field(None, gt=0, description="Highest price of the payoff curve.")
    curve_points: int | None = Field(None, ge=2, le=2000, description="Number of payoff curve samples.")
    pop_horizon_days: float | None = Field(None, gt=0, description="Probability of profit horizon in days.")
    hedge_ratio: float = Field(0.0, ge=0, le=1, description="Fraction of the token0 notional held short.")
    swapped_pair: bool = Field(False, description="When true, prices are returned as token0/token1.")

    position_id: str | None = Field(None, description="Position identifier used for fee snapshots.")
    block_number: int | None = Field(None, ge=0, description="Block of the on-chain data.")


class MetricResponse(BaseModel):
    value: float | None
    condition: str | None
    display: str


class PayoffPointResponse(BaseModel):
    price: float
    profit_loss: float


class FeeSnapshotResponse(BaseModel):
    block_number: int
    fees_token0: Decimal
    fees_token1: Decimal


class PositionAnalyticsResponse(BaseModel):
    status: str
    price_lower: float
    price_upper: float
    price_lower_display: str
    price_upper_display: str
    current_price: float
    entry_price: float
    strike: float
    range_factor: MetricResponse
    capital_efficiency: MetricResponse
    implied_volatility: MetricResponse
    effective_dte: MetricResponse
    delta: MetricResponse
    probability_of_profit: MetricResponse
    expected_return: MetricResponse
    break_even_low: MetricResponse
    break_even_high: MetricResponse
    uncollected_fees0: MetricResponse
    uncollected_fees1: MetricResponse
    amount0: float
    amount1: float
    token0_ratio: int
    position_value: float
    base_value: float
    fees_value: float
    profit_loss: float
    payoff_curve: list[PayoffPointResponse]
    previous_fee_snapshot: FeeSnapshotResponse | None = None


class PositionPreviewRequest(BaseModel):
    strike: float = Field(..., gt=0, description="Geometric mean of the range bounds (token1/token0).")
    range_factor: float = Field(..., ge=1, description="Square root of upper/lower; bounds are strike / r and strike * r.")
    current_price: float = Field(..., gt=0, description="Current price token1/token0; also the entry price.")
    fee_tier: int = Field(..., description="Pool fee tier in hundredths of a bip (100, 500, 3000, 10000).")
    liquidity: int = Field(..., gt=0, description="Raw liquidity of the previewed position.")
    token0_decimals: int = Field(0, ge=0, le=36, description="Decimals of token0.")
    token1_decimals: int = Field(0, ge=0, le=36, description="Decimals of token1.")
    strike_steps: int = Field(0, ge=-1000, le=1000, description="Tick-spacing steps applied to the strike.")
    width_steps: int = Field(0, ge=-1000, le=1000, description="Tick-spacing steps applied to the range factor.")

    daily_volume_usd: float | None = Field(None, ge=0, description="Pool volume over the last 24h in USD.")
    total_value_locked_usd: float | None = Field(None, ge=0, description="Pool TVL in USD.")
    pool_liquidity: int | None = Field(None, ge=0, description="Active pool liquidity, used when TVL is missing.")
    token0_price_usd: float | None = Field(None, ge=0, description="USD price of token0, used when TVL is missing.")

    domain_min: float | None = Field(None, gt=0, description="Lowest price of the payoff curve.")
    domain_max: float | None = Field(None, gt=0, description="Highest price of the payoff curve.")
    curve_points: int | None = Field(None, ge=2, le=2000, description="Number of payoff curve samples.")
    pop_horizon_days: float | None = Field(None, gt=0, description="Probability of profit horizon in days.")
    hedge_ratio: float = Field(0.0, ge=0, le=1, description="Fraction of the token0 notional held short.")


class PositionPreviewResponse(PositionAnalyticsResponse):
    tick_lower: int
    tick_upper: int
