from __future__ import annotations

from typing import Protocol

from lp_analytics.domain.entities.fee_snapshot import FeeSnapshot


class FeeSnapshotPort(Protocol):
    def get_latest_fee_snapshot(self, *, position_id: str) -> FeeSnapshot | None:
        ...

    def save_fee_snapshot(self, snapshot: FeeSnapshot) -> None:
        ...
