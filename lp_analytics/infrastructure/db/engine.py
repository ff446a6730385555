from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import create_engine, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


@lru_cache(maxsize=4)
def get_engine(dsn: str) -> Engine:
    url = make_url(dsn)
    logger.info("db: engine created backend=%s database=%s", url.get_backend_name(), url.database)
    return create_engine(url, pool_pre_ping=True)


def create_fee_snapshot_schema(engine: Engine) -> None:
    from lp_analytics.infrastructure.db.models.fee_snapshot import PositionFeeSnapshotModel

    Base.metadata.create_all(engine, tables=[PositionFeeSnapshotModel.__table__])
