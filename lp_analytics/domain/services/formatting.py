from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from lp_analytics.domain.entities.analytics import AnalyticsCondition, MetricResult
from lp_analytics.domain.entities.position import TickLimits


NOT_AVAILABLE = "-"
UNDEFINED = "N/A"
BELOW_ONE = "<1"
MAX_DISPLAY_DAYS = 100_000

_CONDITION_DISPLAY = {
    AnalyticsCondition.DEGENERATE_RANGE: UNDEFINED,
    AnalyticsCondition.ZERO_VOLATILITY: UNDEFINED,
    AnalyticsCondition.MISSING_MARKET_DATA: NOT_AVAILABLE,
    AnalyticsCondition.NO_BREAK_EVEN_IN_DOMAIN: NOT_AVAILABLE,
    AnalyticsCondition.BELOW_ONE_DAY: BELOW_ONE,
}


def to_significant(value: float | Decimal, sig_figs: int) -> str:
    value = float(value)
    if value == 0:
        return "0"
    exponent = math.floor(math.log10(abs(value)))
    # Quantize the shortest repr, so digits past sig_figs print as zeros.
    quantum = Decimal(1).scaleb(exponent - sig_figs + 1)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_price(price: float | None, sig_figs: int = 5) -> str:
    if price is None:
        return NOT_AVAILABLE
    if price < 0.00000001:
        return "<0.00000001"
    return to_significant(price, sig_figs)


def format_tick_price(
    price: float | None,
    at_limit: TickLimits,
    bound: Literal["lower", "upper"],
    sig_figs: int = 5,
) -> str:
    if bound == "lower" and at_limit.lower:
        return "0"
    if bound == "upper" and at_limit.upper:
        return "∞"
    return format_price(price, sig_figs)


def format_amount(num: float | Decimal | None, digits: int = 2) -> str:
    if num is None:
        return NOT_AVAILABLE
    num = float(num)
    if num == 0:
        return "0"
    if num < 0:
        return "-" + format_amount(-num, digits)
    if num < 0.001:
        return "<0.001"
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.2f}B"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.2f}M"
    if num > 10000:
        mantissa = 0
    elif num > 1000:
        mantissa = 1
    elif num < 100:
        mantissa = 3
    else:
        mantissa = digits
    return f"{num:.{mantissa}f}"


def format_metric(result: MetricResult, *, digits: int = 2, percent: bool = False) -> str:
    if result.value is None:
        return _CONDITION_DISPLAY.get(result.condition, NOT_AVAILABLE)
    value = float(result.value)
    if percent:
        return f"{value * 100:.0f}%"
    return format_amount(value, digits)


def format_days(result: MetricResult) -> str:
    if result.value is None:
        return _CONDITION_DISPLAY.get(result.condition, NOT_AVAILABLE)
    days = float(result.value)
    if days >= MAX_DISPLAY_DAYS:
        return NOT_AVAILABLE
    return f"{days:.0f}"
