from __future__ import annotations

from lp_analytics.shared.config import get_settings


def test_settings_defaults(monkeypatch):
    for name in (
        "POSTGRES_DSN",
        "ANALYTICS_CURVE_POINTS",
        "ANALYTICS_POP_HORIZON_DAYS",
        "ANALYTICS_DOMAIN_MARGIN",
        "ANALYTICS_MIN_DTE_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.postgres_dsn == ""
    assert settings.analytics_curve_points == 193
    assert settings.analytics_pop_horizon_days == 28.0
    assert settings.analytics_domain_margin == 0.5
    assert settings.analytics_min_dte_days == 1.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("POSTGRES_DSN", "postgresql+psycopg://localhost/lp")
    monkeypatch.setenv("ANALYTICS_CURVE_POINTS", "97")
    monkeypatch.setenv("ANALYTICS_POP_HORIZON_DAYS", "14")

    settings = get_settings()

    assert settings.postgres_dsn == "postgresql+psycopg://localhost/lp"
    assert settings.analytics_curve_points == 97
    assert settings.analytics_pop_horizon_days == 14.0
