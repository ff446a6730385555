from __future__ import annotations

from lp_analytics.application.ports.fee_snapshot_port import FeeSnapshotPort
from lp_analytics.application.use_cases.get_position_analytics import GetPositionAnalyticsUseCase
from lp_analytics.application.use_cases.preview_position import PreviewPositionUseCase
from lp_analytics.infrastructure.db.engine import get_engine
from lp_analytics.infrastructure.db.repositories.fee_snapshot_repository import (
    SqlFeeSnapshotRepository,
)
from lp_analytics.shared.config import get_settings


def _get_fee_snapshot_repository() -> FeeSnapshotPort | None:
    settings = get_settings()
    if not settings.postgres_dsn:
        return None
    return SqlFeeSnapshotRepository(get_engine(settings.postgres_dsn))


def get_position_analytics_use_case() -> GetPositionAnalyticsUseCase:
    settings = get_settings()
    return GetPositionAnalyticsUseCase(
        fee_snapshot_port=_get_fee_snapshot_repository(),
        curve_points=settings.analytics_curve_points,
        pop_horizon_days=settings.analytics_pop_horizon_days,
        domain_margin=settings.analytics_domain_margin,
        min_dte_days=settings.analytics_min_dte_days,
    )


def get_position_preview_use_case() -> PreviewPositionUseCase:
    settings = get_settings()
    return PreviewPositionUseCase(
        curve_points=settings.analytics_curve_points,
        pop_horizon_days=settings.analytics_pop_horizon_days,
        domain_margin=settings.analytics_domain_margin,
        min_dte_days=settings.analytics_min_dte_days,
    )
