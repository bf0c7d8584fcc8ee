"""
API v1 Router

All API endpoints for the chart frontend.
"""

from fastapi import APIRouter

from indicator_engine.api.v1.endpoints import prices, charts, presets

router = APIRouter()

# Include all endpoint routers
router.include_router(prices.router, prefix="/prices", tags=["Prices"])
router.include_router(charts.router, prefix="/charts", tags=["Charts"])
router.include_router(presets.router, prefix="/presets", tags=["Presets"])
