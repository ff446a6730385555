from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from lp_analytics.domain.exceptions import InvalidRangeError


class RangeStatus(str, Enum):
    IN_RANGE = "in_range"
    BELOW_RANGE = "below_range"
    ABOVE_RANGE = "above_range"
    REMOVED = "removed"


@dataclass(frozen=True)
class PriceRange:
    lower: float
    upper: float

    def __post_init__(self) -> None:
        for name, value in (("lower", self.lower), ("upper", self.upper)):
            if not math.isfinite(value) or value <= 0:
                raise InvalidRangeError(f"{name} price must be positive and finite.")
        if self.lower > self.upper:
            raise InvalidRangeError("lower price must not exceed upper price.")

    @property
    def is_degenerate(self) -> bool:
        return self.lower == self.upper


@dataclass(frozen=True)
class TickLimits:
    lower: bool = False
    upper: bool = False


@dataclass(frozen=True)
class TickRange:
    tick_lower: int
    tick_upper: int
    range: PriceRange


@dataclass(frozen=True)
class Position:
    tick_lower: int
    tick_upper: int
    range: PriceRange
    liquidity: int
    token0_decimals: int
    token1_decimals: int
    fee_growth_inside0_last: int = 0
    fee_growth_inside1_last: int = 0
    deposited_token0: Decimal = Decimal("0")
    deposited_token1: Decimal = Decimal("0")
    collected_fees_token0: Decimal = Decimal("0")
    collected_fees_token1: Decimal = Decimal("0")

    @property
    def removed(self) -> bool:
        return self.liquidity == 0


@dataclass(frozen=True)
class PoolSnapshot:
    current_price: float
    current_tick: int
    fee_tier: int
    fee_growth_global0: int = 0
    fee_growth_global1: int = 0
    daily_volume_usd: float | None = None
    total_value_locked_usd: float | None = None
    liquidity: int | None = None
    token0_price_usd: float | None = None


@dataclass(frozen=True)
class TickFeeState:
    fee_growth_outside0: int
    fee_growth_outside1: int


@dataclass(frozen=True)
class TokenAmounts:
    amount0: float
    amount1: float
