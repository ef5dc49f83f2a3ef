"""Profit calculation for a holding at a given market price.

Algorithm:
    amount = (current_price - average_price) * quantity
    percentage = (current_price - average_price) / average_price * 100
"""

import math
from dataclasses import dataclass


class InvalidInputError(ValueError):
    """The figures make the computation undefined (e.g. average price <= 0).

    Distinct from an empty or half-typed field, which is never an error.
    """


@dataclass(frozen=True)
class ProfitResult:
    amount: float
    percentage: float


class ProfitCalculator:
    """Computes profit amount and percentage. Stateless."""

    def compute_profit(
        self, average_price: float, quantity: float, current_price: float
    ) -> ProfitResult:
        if not all(math.isfinite(v) for v in (average_price, quantity, current_price)):
            raise InvalidInputError("Prices and quantity must be finite numbers")
        if average_price <= 0:
            raise InvalidInputError(
                f"Average price must be positive to compute profit, got {average_price}"
            )
        if quantity < 0:
            raise InvalidInputError(f"Quantity cannot be negative, got {quantity}")
        if current_price < 0:
            raise InvalidInputError(f"Current price cannot be negative, got {current_price}")

        diff = current_price - average_price
        return ProfitResult(
            amount=diff * quantity,
            percentage=diff / average_price * 100,
        )


# Global instance
profit_calculator = ProfitCalculator()
