from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from lp_analytics.domain.entities.position import RangeStatus


class AnalyticsCondition(str, Enum):
    DEGENERATE_RANGE = "degenerate_range"
    FEE_GROWTH_INCONSISTENCY = "fee_growth_inconsistency"
    MISSING_MARKET_DATA = "missing_market_data"
    ZERO_VOLATILITY = "zero_volatility"
    NO_BREAK_EVEN_IN_DOMAIN = "no_break_even_in_domain"
    BELOW_ONE_DAY = "below_one_day"


@dataclass(frozen=True)
class MetricResult:
    value: float | Decimal | None
    condition: AnalyticsCondition | None = None

    @property
    def available(self) -> bool:
        return self.value is not None

    @classmethod
    def of(cls, value: float | Decimal) -> "MetricResult":
        return cls(value=value)

    @classmethod
    def unavailable(cls, condition: AnalyticsCondition) -> "MetricResult":
        return cls(value=None, condition=condition)


@dataclass(frozen=True)
class OptionTerms:
    strike: float
    range_factor: MetricResult


@dataclass(frozen=True)
class PriceDomain:
    min: float
    max: float


@dataclass(frozen=True)
class PayoffPoint:
    price: float
    profit_loss: float


@dataclass(frozen=True)
class BreakEvenPoints:
    low: float | None
    high: float | None
    condition: AnalyticsCondition | None = None


@dataclass(frozen=True)
class AnalyticsSnapshot:
    status: RangeStatus
    price_lower: float
    price_upper: float
    current_price: float
    entry_price: float
    strike: float
    range_factor: MetricResult
    capital_efficiency: MetricResult
    implied_volatility: MetricResult
    effective_dte: MetricResult
    delta: MetricResult
    probability_of_profit: MetricResult
    expected_return: MetricResult
    break_even_low: MetricResult
    break_even_high: MetricResult
    uncollected_fees0: MetricResult
    uncollected_fees1: MetricResult
    amount0: float
    amount1: float
    token0_ratio: int
    position_value: float
    base_value: float
    fees_value: float
    profit_loss: float
    payoff_curve: tuple[PayoffPoint, ...]
