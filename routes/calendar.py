from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel

from services import calendar_service
from services.forecast_dto import MonthSummaryDTO, RecurringRuleDTO, matrix_to_json
from utils.dates import MAX_YEAR, MIN_YEAR, format_date, parse_iso_date
from utils.money import parse_money

router = APIRouter(prefix="/api/calendar")


class AmountItemIn(BaseModel):
    name: str
    amount: Decimal
    recurring_id: Optional[str] = None


class DayUpdate(BaseModel):
    date: Optional[str] = None
    bills: List[AmountItemIn] = []
    paydays: List[AmountItemIn] = []
    purchases: List[AmountItemIn] = []
    savings: List[AmountItemIn] = []


class RecurringCreate(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    cadence: Optional[str] = None
    months_count: Optional[int] = None
    forever: bool = False


class RecurringDelete(BaseModel):
    recurring_id: Optional[str] = None
    date: Optional[str] = None
    scope: Optional[str] = None


def get_scope_key(x_scope_key: Optional[str] = Header(None)) -> str:
    """Scope comes from the ``X-Scope-Key`` header; access control lives upstream."""
    if x_scope_key and x_scope_key.strip():
        return x_scope_key.strip()
    return calendar_service.DEFAULT_SCOPE_KEY


def require_date(value: Optional[str]) -> date:
    value = (value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail="Date is required")
    parsed = parse_iso_date(value)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid date format")
    return parsed


def require_money(value: str, field: str) -> Decimal:
    try:
        return parse_money(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field}")


def resolve_month(year: Optional[int], month: Optional[int]) -> tuple:
    today = date.today()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if year < MIN_YEAR or year > MAX_YEAR:
        raise HTTPException(status_code=400, detail="Year is out of range")
    if month < 1 or month > 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    return year, month


@router.get("")
def get_month(year: Optional[int] = Query(None), month: Optional[int] = Query(None),
              scope_key: str = Depends(get_scope_key)):
    """
    Return the month grid. ``month`` is 1-based here; the core is 0-based.
    """
    year, month = resolve_month(year, month)
    matrix = calendar_service.get_month(year, month - 1, scope_key)
    return {"year": year, "month": month, "matrix": matrix_to_json(matrix)}


@router.post("/day")
def upsert_day(payload: DayUpdate, scope_key: str = Depends(get_scope_key)):
    day = require_date(payload.date)
    normalized = calendar_service.upsert_day(
        format_date(day),
        scope_key,
        [item.model_dump() for item in payload.bills],
        [item.model_dump() for item in payload.paydays],
        [item.model_dump() for item in payload.purchases],
        [item.model_dump() for item in payload.savings],
    )
    return {"message": "Day updated", "date": normalized}


@router.post("/recurring")
def create_recurring(payload: RecurringCreate, scope_key: str = Depends(get_scope_key)):
    start = require_date(payload.date)
    try:
        rule = calendar_service.create_recurring_rule(
            scope_key,
            type_=payload.type,
            name=payload.name,
            amount=payload.amount,
            start_date=format_date(start),
            cadence=payload.cadence,
            months_count=payload.months_count,
            forever=payload.forever,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "message": "Recurring rule created",
        "rule": asdict(RecurringRuleDTO.from_rule(rule)),
    }


@router.post("/recurring/delete")
def delete_recurring(payload: RecurringDelete, scope_key: str = Depends(get_scope_key)):
    recurring_id = (payload.recurring_id or "").strip()
    if not recurring_id:
        raise HTTPException(status_code=400, detail="Recurring id is required")
    day = require_date(payload.date)

    try:
        found = calendar_service.delete_recurring(
            scope_key, recurring_id, format_date(day), payload.scope
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not found:
        raise HTTPException(status_code=404, detail="Recurring rule not found")
    return {"message": "Recurring rule updated"}


@router.get("/summary")
def get_month_summary(year: Optional[int] = Query(None), month: Optional[int] = Query(None),
                      initial_funds: str = Query("0"),
                      scope_key: str = Depends(get_scope_key)):
    year, month = resolve_month(year, month)
    funds = require_money(initial_funds, "initial_funds")
    summary = calendar_service.get_month_summary(year, month - 1, scope_key, funds)
    return asdict(MonthSummaryDTO.from_summary(year, month, summary))
