from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    analytics_curve_points: int
    analytics_pop_horizon_days: float
    analytics_domain_margin: float
    analytics_min_dte_days: float


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        analytics_curve_points=int(_env("ANALYTICS_CURVE_POINTS", "193")),
        analytics_pop_horizon_days=float(_env("ANALYTICS_POP_HORIZON_DAYS", "28")),
        analytics_domain_margin=float(_env("ANALYTICS_DOMAIN_MARGIN", "0.5")),
        analytics_min_dte_days=float(_env("ANALYTICS_MIN_DTE_DAYS", "1")),
    )
