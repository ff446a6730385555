from __future__ import annotations

import logging

from sqlalchemy import text

from lp_analytics.application.ports.fee_snapshot_port import FeeSnapshotPort
from lp_analytics.domain.entities.fee_snapshot import FeeSnapshot
from lp_analytics.infrastructure.db.mappers.fee_snapshot_mapper import (
    map_fee_snapshot_to_params,
    map_row_to_fee_snapshot,
)


logger = logging.getLogger(__name__)


class SqlFeeSnapshotRepository(FeeSnapshotPort):
    def __init__(self, engine):
        self._engine = engine

    def get_latest_fee_snapshot(self, *, position_id: str) -> FeeSnapshot | None:
        sql = """
            SELECT position_id, block_number, fees_token0, fees_token1
            FROM position_fee_snapshots
            WHERE position_id = :position_id
            ORDER BY block_number DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"position_id": position_id}).mappings().first()
        logger.debug(
            "fee_snapshot_repo: get_latest position_id=%s found=%s",
            position_id,
            row is not None,
        )
        if row is None:
            return None
        return map_row_to_fee_snapshot(row)

    def save_fee_snapshot(self, snapshot: FeeSnapshot) -> None:
        sql = text(
            """
            INSERT INTO position_fee_snapshots (
                position_id,
                block_number,
                fees_token0,
                fees_token1,
                created_at
            )
            VALUES (
                :position_id,
                :block_number,
                :fees_token0,
                :fees_token1,
                CURRENT_TIMESTAMP
            )
            ON CONFLICT (position_id, block_number)
            DO UPDATE SET
                fees_token0 = EXCLUDED.fees_token0,
                fees_token1 = EXCLUDED.fees_token1
            """
        )
        with self._engine.begin() as conn:
            conn.execute(sql, map_fee_snapshot_to_params(snapshot))
        logger.debug(
            "fee_snapshot_repo: save position_id=%s block_number=%s",
            snapshot.position_id,
            snapshot.block_number,
        )
