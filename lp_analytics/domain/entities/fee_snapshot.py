from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FeeSnapshot:
    position_id: str
    block_number: int
    fees_token0: Decimal
    fees_token1: Decimal
