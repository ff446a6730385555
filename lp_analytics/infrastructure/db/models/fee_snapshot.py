from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from lp_analytics.infrastructure.db.engine import Base


class PositionFeeSnapshotModel(Base):
    __tablename__ = "position_fee_snapshots"
    __table_args__ = (
        UniqueConstraint("position_id", "block_number", name="uq_position_fee_snapshots_position_block"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Decimal strings; fee amounts can exceed NUMERIC precision of some backends.
    fees_token0: Mapped[str] = mapped_column(Text, nullable=False)
    fees_token1: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
