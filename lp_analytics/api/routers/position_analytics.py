from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_analytics.api.auth import require_jwt
from lp_analytics.api.deps import get_position_analytics_use_case, get_position_preview_use_case
from lp_analytics.api.schemas.position_analytics import (
    FeeSnapshotResponse,
    MetricResponse,
    PayoffPointResponse,
    PositionAnalyticsRequest,
    PositionAnalyticsResponse,
    PositionPreviewRequest,
    PositionPreviewResponse,
)
from lp_analytics.application.dto.position_analytics import GetPositionAnalyticsInput
from lp_analytics.application.dto.position_preview import PreviewPositionInput
from lp_analytics.application.use_cases.get_position_analytics import GetPositionAnalyticsUseCase
from lp_analytics.application.use_cases.preview_position import PreviewPositionUseCase
from lp_analytics.domain.entities.analytics import AnalyticsSnapshot, MetricResult
from lp_analytics.domain.entities.position import TickLimits
from lp_analytics.domain.exceptions import PositionAnalyticsInputError
from lp_analytics.domain.services.formatting import (
    format_days,
    format_metric,
    format_price,
    format_tick_price,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _metric(result: MetricResult, *, percent: bool = False, digits: int = 2) -> MetricResponse:
    return MetricResponse(
        value=float(result.value) if result.value is not None else None,
        condition=result.condition.value if result.condition is not None else None,
        display=format_metric(result, digits=digits, percent=percent),
    )


def _days_metric(result: MetricResult) -> MetricResponse:
    return MetricResponse(
        value=float(result.value) if result.value is not None else None,
        condition=result.condition.value if result.condition is not None else None,
        display=format_days(result),
    )


def _price_metric(result: MetricResult) -> MetricResponse:
    if not result.available:
        return _metric(result)
    return MetricResponse(
        value=float(result.value),
        condition=None,
        display=format_price(float(result.value)),
    )


def _snapshot_fields(snapshot: AnalyticsSnapshot, tick_limits: TickLimits) -> dict:
    return {
        "status": snapshot.status.value,
        "price_lower": snapshot.price_lower,
        "price_upper": snapshot.price_upper,
        "price_lower_display": format_tick_price(snapshot.price_lower, tick_limits, "lower"),
        "price_upper_display": format_tick_price(snapshot.price_upper, tick_limits, "upper"),
        "current_price": snapshot.current_price,
        "entry_price": snapshot.entry_price,
        "strike": snapshot.strike,
        "range_factor": _metric(snapshot.range_factor, digits=4),
        "capital_efficiency": _metric(snapshot.capital_efficiency),
        "implied_volatility": _metric(snapshot.implied_volatility, percent=True),
        "effective_dte": _days_metric(snapshot.effective_dte),
        "delta": _metric(snapshot.delta, digits=4),
        "probability_of_profit": _metric(snapshot.probability_of_profit, percent=True),
        "expected_return": _metric(snapshot.expected_return, percent=True),
        "break_even_low": _price_metric(snapshot.break_even_low),
        "break_even_high": _price_metric(snapshot.break_even_high),
        "uncollected_fees0": _metric(snapshot.uncollected_fees0, digits=6),
        "uncollected_fees1": _metric(snapshot.uncollected_fees1, digits=6),
        "amount0": snapshot.amount0,
        "amount1": snapshot.amount1,
        "token0_ratio": snapshot.token0_ratio,
        "position_value": snapshot.position_value,
        "base_value": snapshot.base_value,
        "fees_value": snapshot.fees_value,
        "profit_loss": snapshot.profit_loss,
        "payoff_curve": [
            PayoffPointResponse(price=point.price, profit_loss=point.profit_loss)
            for point in snapshot.payoff_curve
        ],
    }


@router.post("/v1/positions/analytics", response_model=PositionAnalyticsResponse)
def position_analytics(
    req: PositionAnalyticsRequest,
    _token: str = Depends(require_jwt),
    use_case: GetPositionAnalyticsUseCase = Depends(get_position_analytics_use_case),
):
    try:
        result = use_case.execute(GetPositionAnalyticsInput(**req.model_dump()))
    except PositionAnalyticsInputError as exc:
        logger.warning(
            "position_analytics_router: invalid_input position_id=%s tick_lower=%s tick_upper=%s detail=%s",
            req.position_id,
            req.tick_lower,
            req.tick_upper,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    previous = result.previous_fee_snapshot
    return PositionAnalyticsResponse(
        **_snapshot_fields(result.snapshot, result.tick_limits),
        previous_fee_snapshot=(
            FeeSnapshotResponse(
                block_number=previous.block_number,
                fees_token0=previous.fees_token0,
                fees_token1=previous.fees_token1,
            )
            if previous is not None
            else None
        ),
    )


@router.post("/v1/positions/preview", response_model=PositionPreviewResponse)
def position_preview(
    req: PositionPreviewRequest,
    _token: str = Depends(require_jwt),
    use_case: PreviewPositionUseCase = Depends(get_position_preview_use_case),
):
    try:
        result = use_case.execute(PreviewPositionInput(**req.model_dump()))
    except PositionAnalyticsInputError as exc:
        logger.warning(
            "position_analytics_router: invalid_preview strike=%s range_factor=%s fee_tier=%s detail=%s",
            req.strike,
            req.range_factor,
            req.fee_tier,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return PositionPreviewResponse(
        **_snapshot_fields(result.snapshot, result.tick_limits),
        tick_lower=result.tick_range.tick_lower,
        tick_upper=result.tick_range.tick_upper,
    )
