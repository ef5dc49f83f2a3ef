"""Holding API routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from investmate.models.database import get_db
from investmate.models.holding import Holding
from investmate.services.numeric_text import format_number, format_percentage
from investmate.services.profit import InvalidInputError, profit_calculator
from investmate.services.stock_management import stock_management_service
from investmate.api.schemas import (
    HoldingCreateRequest,
    HoldingUpdateRequest,
    HoldingResponse,
    ProfitResponse,
)

router = APIRouter(prefix="/api/holdings", tags=["holdings"])


def _to_response(h: Holding) -> HoldingResponse:
    return HoldingResponse(
        symbol=h.symbol,
        name=h.name,
        average_price=h.average_price,
        quantity=h.quantity,
        total_price=round(h.total_price, 2),
        created_at=h.created_at,
        updated_at=h.updated_at,
    )


@router.get("", response_model=list[HoldingResponse])
async def list_holdings(db: AsyncSession = Depends(get_db)):
    holdings = await stock_management_service.list_holdings(db)
    return [_to_response(h) for h in holdings]


@router.post("", response_model=HoldingResponse)
async def add_holding(req: HoldingCreateRequest, db: AsyncSession = Depends(get_db)):
    symbol = req.symbol.strip().upper()
    if not symbol:
        raise HTTPException(status_code=400, detail="Symbol cannot be empty")
    if await stock_management_service.get_holding(db, symbol) is not None:
        raise HTTPException(status_code=409, detail="Holding already exists")
    h = await stock_management_service.add_holding(
        db, symbol, req.average_price, req.quantity, name=req.name
    )
    return _to_response(h)


@router.get("/{symbol}", response_model=HoldingResponse)
async def get_holding(symbol: str, db: AsyncSession = Depends(get_db)):
    h = await stock_management_service.get_holding(db, symbol.upper())
    if h is None:
        raise HTTPException(status_code=404, detail="Holding not found")
    return _to_response(h)


@router.put("/{symbol}", response_model=HoldingResponse)
async def update_holding(
    symbol: str,
    req: HoldingUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    h = await stock_management_service.update_holding(
        db,
        symbol.upper(),
        average_price=req.average_price,
        quantity=req.quantity,
        name=req.name,
    )
    if h is None:
        raise HTTPException(status_code=404, detail="Holding not found")
    return _to_response(h)


@router.delete("/{symbol}")
async def remove_holding(symbol: str, db: AsyncSession = Depends(get_db)):
    await stock_management_service.remove_holding(db, symbol.upper())
    return {"status": "ok"}


@router.get("/{symbol}/profit", response_model=ProfitResponse)
async def get_holding_profit(
    symbol: str, current_price: float, db: AsyncSession = Depends(get_db)
):
    """Profit of a stored holding at the supplied current price."""
    h = await stock_management_service.get_holding(db, symbol.upper())
    if h is None:
        raise HTTPException(status_code=404, detail="Holding not found")

    try:
        result = profit_calculator.compute_profit(
            h.average_price, h.quantity, current_price
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ProfitResponse(
        amount=round(result.amount, 2),
        percentage=round(result.percentage, 4),
        amount_text=format_number(result.amount),
        percentage_text=format_percentage(result.percentage),
    )
