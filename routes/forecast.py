from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from routes.calendar import get_scope_key, require_date, require_money
from services import calendar_service
from services.forecast_dto import BalanceResponseDTO, BetweenPaydaysDTO

router = APIRouter(prefix="/api/forecast")


@router.get("/balance")
def get_balance(date_value: str = Query(..., alias="date"),
                base_funds: str = Query("0"),
                base_savings: str = Query("0"),
                scope_key: str = Depends(get_scope_key)):
    """
    Return funds and savings as of a date, inclusive.

    Query Parameters:
        date: Reference date in ISO format (YYYY-MM-DD).
        base_funds / base_savings (optional): Starting balances, default 0.
    """
    as_of = require_date(date_value)
    funds, savings = calendar_service.get_balance_for_date(
        scope_key,
        as_of,
        require_money(base_funds, "base_funds"),
        require_money(base_savings, "base_savings"),
    )
    return asdict(BalanceResponseDTO(
        date=as_of.isoformat(),
        funds=float(funds),
        savings=float(savings),
    ))


@router.get("/between-paydays")
def get_between_paydays(date_value: Optional[str] = Query(None, alias="date"),
                        base_funds: str = Query("0"),
                        scope_key: str = Depends(get_scope_key)):
    """
    Return the projected balance at the next payday after ``date`` (default today).

    ``available`` is false when no later payday is known.
    """
    reference = require_date(date_value) if date_value is not None else date.today()
    projection = calendar_service.get_between_paydays(
        scope_key, reference, require_money(base_funds, "base_funds")
    )
    return asdict(BetweenPaydaysDTO.from_projection(reference, projection))
