from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from lp_analytics.domain.entities.fee_snapshot import FeeSnapshot


def map_row_to_fee_snapshot(row: Mapping[str, Any]) -> FeeSnapshot:
    return FeeSnapshot(
        position_id=str(row["position_id"]),
        block_number=int(row["block_number"]),
        fees_token0=Decimal(str(row["fees_token0"])) if row["fees_token0"] is not None else Decimal("0"),
        fees_token1=Decimal(str(row["fees_token1"])) if row["fees_token1"] is not None else Decimal("0"),
    )


def map_fee_snapshot_to_params(snapshot: FeeSnapshot) -> dict[str, Any]:
    return {
        "position_id": snapshot.position_id,
        "block_number": snapshot.block_number,
        "fees_token0": str(snapshot.fees_token0),
        "fees_token1": str(snapshot.fees_token1),
    }
