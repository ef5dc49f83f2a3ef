"""Calculator API routes: field derivation sessions, profit and additional purchase."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from investmate.models.database import get_db
from investmate.services.additional_purchase import additional_purchase_calculator
from investmate.services.engine import (
    FieldChange,
    FieldDerivationEngine,
    ReadOnlyTripleError,
)
from investmate.services.numeric_text import format_number, format_percentage
from investmate.services.profit import InvalidInputError, profit_calculator
from investmate.services.sessions import CalculatorSession, calculator_sessions
from investmate.services.stock_management import stock_management_service
from investmate.api.schemas import (
    AdditionalPurchaseRequest,
    AdditionalPurchaseResponse,
    FieldChangeRequest,
    FieldChangeResponse,
    FieldUpdateResponse,
    ProfitRequest,
    ProfitResponse,
    SessionCreateRequest,
    SessionResponse,
)

router = APIRouter(prefix="/api/calculator", tags=["calculator"])


def _session_response(session: CalculatorSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        symbol=session.symbol,
        read_only=session.engine.read_only,
        state=session.engine.last_state.value,
        fields=session.engine.snapshot(),
    )


def _get_session_or_404(session_id: str) -> CalculatorSession:
    session = calculator_sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/sessions", response_model=SessionResponse)
async def open_session(req: SessionCreateRequest, db: AsyncSession = Depends(get_db)):
    engine = FieldDerivationEngine(read_only=req.read_only)
    symbol = req.symbol.strip().upper() if req.symbol else None

    if symbol:
        holding = await stock_management_service.get_holding(db, symbol)
        if holding is None:
            raise HTTPException(status_code=404, detail="Holding not found")
        engine.seed(holding.average_price, holding.quantity)

    session = calculator_sessions.create(engine, symbol=symbol)
    return _session_response(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _session_response(_get_session_or_404(session_id))


@router.post("/sessions/{session_id}/changes", response_model=FieldChangeResponse)
def apply_change(session_id: str, req: FieldChangeRequest):
    session = _get_session_or_404(session_id)

    # Sync route runs in the threadpool; the lock serialises events per session
    with session.lock:
        try:
            updates = session.engine.apply(
                FieldChange(field_id=req.field_id, raw_text=req.raw_text)
            )
        except ReadOnlyTripleError as e:
            raise HTTPException(status_code=409, detail=str(e))
        fields = session.engine.snapshot()
        state = session.engine.last_state.value

    return FieldChangeResponse(
        session_id=session.session_id,
        state=state,
        updates=[
            FieldUpdateResponse(field_id=u.field_id, display_text=u.display_text)
            for u in updates
        ],
        fields=fields,
    )


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str):
    if not calculator_sessions.discard(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "ok"}


@router.post("/profit", response_model=ProfitResponse)
async def compute_profit(req: ProfitRequest):
    try:
        result = profit_calculator.compute_profit(
            req.average_price, req.quantity, req.current_price
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ProfitResponse(
        amount=round(result.amount, 2),
        percentage=round(result.percentage, 4),
        amount_text=format_number(result.amount),
        percentage_text=format_percentage(result.percentage),
    )


@router.post("/additional-purchase", response_model=AdditionalPurchaseResponse)
async def additional_purchase(req: AdditionalPurchaseRequest):
    try:
        summary = additional_purchase_calculator.combine_purchase(
            req.current_average,
            req.current_quantity,
            req.purchase_price,
            req.purchase_quantity,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return AdditionalPurchaseResponse(
        average_price=round(summary.average_price, 4),
        quantity=summary.quantity,
        total_price=round(summary.total_price, 2),
        average_change=round(summary.average_change, 4),
        average_change_pct=round(summary.average_change_pct, 4),
        display={
            "average_price": format_number(summary.average_price),
            "quantity": format_number(summary.quantity),
            "total_price": format_number(summary.total_price),
            "average_change_pct": format_percentage(summary.average_change_pct),
        },
    )
