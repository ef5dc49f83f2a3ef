"""Additional purchase calculator.

Combines an existing position with a new purchase of the same stock:

    quantity = current_quantity + purchase_quantity
    total_price = current_average * current_quantity + purchase_price * purchase_quantity
    average_price = total_price / quantity
"""

import math
from dataclasses import dataclass

from investmate.services.derivation import (
    PriceQuantityTotalRule,
    price_quantity_total_rule,
)
from investmate.services.profit import InvalidInputError


@dataclass(frozen=True)
class PurchaseSummary:
    average_price: float
    quantity: float
    total_price: float
    average_change: float
    average_change_pct: float


class AdditionalPurchaseCalculator:
    """Works out the new average price after buying more of a holding."""

    def __init__(self, rule: PriceQuantityTotalRule | None = None):
        self.rule = rule or price_quantity_total_rule

    def combine_purchase(
        self,
        current_average: float,
        current_quantity: float,
        purchase_price: float,
        purchase_quantity: float,
    ) -> PurchaseSummary:
        figures = (current_average, current_quantity, purchase_price, purchase_quantity)
        if not all(math.isfinite(v) for v in figures):
            raise InvalidInputError("Prices and quantities must be finite numbers")
        if current_average <= 0 or purchase_price <= 0:
            raise InvalidInputError("Prices must be positive")
        if current_quantity < 0 or purchase_quantity < 0:
            raise InvalidInputError("Quantities cannot be negative")

        quantity = current_quantity + purchase_quantity
        if quantity <= 0:
            raise InvalidInputError("Combined quantity must be positive")

        current_total = self.rule.derive_total(current_average, current_quantity) or 0.0
        purchase_total = self.rule.derive_total(purchase_price, purchase_quantity) or 0.0
        total_price = current_total + purchase_total
        average_price = self.rule.derive_average(total_price, quantity)

        average_change = average_price - current_average
        return PurchaseSummary(
            average_price=average_price,
            quantity=quantity,
            total_price=total_price,
            average_change=average_change,
            average_change_pct=average_change / current_average * 100,
        )


# Global instance
additional_purchase_calculator = AdditionalPurchaseCalculator()
