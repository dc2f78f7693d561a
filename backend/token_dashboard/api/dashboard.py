from __future__ import annotations
from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse
from token_dashboard.schemas.dashboard import ChartData, DashboardData, HealthStatus
from token_dashboard.services.chart_data import generate_chart_data
from token_dashboard.services.dashboard import DashboardAggregator, dashboard_aggregator

router = APIRouter(prefix="/api", tags=["dashboard"])

DEGRADED_HEADER = "X-Dashboard-Degraded"


def get_aggregator() -> DashboardAggregator:
    return dashboard_aggregator


@router.get("/dashboard-data", response_model=DashboardData)
async def get_dashboard_data(
    response: Response,
    aggregator: DashboardAggregator = Depends(get_aggregator),
):
    # Always 200: upstream failures are already absorbed into synthetic data
    result = await aggregator.build_dashboard_result()
    if result.degraded:
        response.headers[DEGRADED_HEADER] = ",".join(result.degraded)
    return result.record


@router.get("/health", response_model=HealthStatus, response_model_exclude_none=True)
async def health(aggregator: DashboardAggregator = Depends(get_aggregator)):
    status = await aggregator.check_health()
    if status.status != "healthy":
        return JSONResponse(
            status_code=500,
            content=status.model_dump(by_alias=True, exclude_none=True),
        )
    return status


@router.get("/chart-data", response_model=ChartData)
async def get_chart_data(period: str = Query("24h")):
    return generate_chart_data(period=period)
