from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lp_analytics.api.routers.health import router as health_router
from lp_analytics.api.routers.position_analytics import router as position_analytics_router

app = FastAPI(title="LP Analytics API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(position_analytics_router)
