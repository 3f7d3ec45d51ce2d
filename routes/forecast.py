from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

import config
from services.forecast_dto import ForecastResponseDTO
from services.projection_service import calculate_projection

router = APIRouter()


@router.get("/forecast")
def get_forecast(as_of: Optional[str] = Query(None)):
    """
    Predicted account balances on a future date.

    Query Parameters:
        as_of (optional): Target date in ISO format (YYYY-MM-DD).
                          Missing or not in the future returns current balances.

    Read-only; never advances a recurring cursor.
    """
    as_of_date = None
    if as_of:
        try:
            as_of_date = date.fromisoformat(as_of)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")

    projection = calculate_projection(as_of_date, config.BASE_CURRENCY)
    return asdict(ForecastResponseDTO.from_projection(projection))
