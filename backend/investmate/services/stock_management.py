"""Holding management service."""

from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from investmate.models.holding import Holding


class StockManagementService:
    """Manages the user's recorded holdings."""

    async def list_holdings(self, session: AsyncSession) -> list[Holding]:
        result = await session.execute(select(Holding).order_by(Holding.created_at))
        return list(result.scalars().all())

    async def get_holding(self, session: AsyncSession, symbol: str) -> Holding | None:
        return await session.get(Holding, symbol)

    async def add_holding(
        self,
        session: AsyncSession,
        symbol: str,
        average_price: float,
        quantity: float,
        name: str | None = None,
    ) -> Holding:
        holding = Holding(
            symbol=symbol,
            name=name,
            average_price=average_price,
            quantity=quantity,
        )
        session.add(holding)
        await session.commit()
        return holding

    async def update_holding(
        self,
        session: AsyncSession,
        symbol: str,
        average_price: float | None = None,
        quantity: float | None = None,
        name: str | None = None,
    ) -> Holding | None:
        holding = await session.get(Holding, symbol)
        if holding is None:
            return None
        if average_price is not None:
            holding.average_price = average_price
        if quantity is not None:
            holding.quantity = quantity
        if name is not None:
            holding.name = name
        holding.updated_at = datetime.now().isoformat()
        await session.commit()
        return holding

    async def remove_holding(self, session: AsyncSession, symbol: str) -> None:
        await session.execute(delete(Holding).where(Holding.symbol == symbol))
        await session.commit()


stock_management_service = StockManagementService()
