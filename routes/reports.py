from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query

import config
from services.forecast_dto import PeriodReportDTO
from services.report_service import get_period_report

router = APIRouter()


@router.get("/reports")
def get_report(period: str = Query("month")):
    """
    Income, expenses and spending by category for the current period.

    Query Parameters:
        period (optional): day, week, month or year. Defaults to month.
    """
    try:
        report = get_period_report(period, config.BASE_CURRENCY)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(PeriodReportDTO.from_report(report))
