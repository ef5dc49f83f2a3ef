"""Price / quantity / total derivation rule.

Relation:
    total_price = average_price * quantity

Any one field can be solved from the other two. A derivation is only defined
when both inputs are present and strictly positive; otherwise the result is
None and the derived field is expected to be cleared.
"""

from enum import Enum


class FieldId(str, Enum):
    """Identifiers of the three linked fields of a holding."""

    AVERAGE_PRICE = "average_price"
    QUANTITY = "quantity"
    TOTAL_PRICE = "total_price"


def _positive(*values: float | None) -> bool:
    return all(v is not None and v > 0 for v in values)


class PriceQuantityTotalRule:
    """Solves `total = average * quantity` for any one of its fields."""

    fields = (FieldId.AVERAGE_PRICE, FieldId.QUANTITY, FieldId.TOTAL_PRICE)

    def derive_total(self, average: float | None, quantity: float | None) -> float | None:
        if not _positive(average, quantity):
            return None
        return average * quantity

    def derive_quantity(self, average: float | None, total: float | None) -> float | None:
        if not _positive(average, total):
            return None
        return total / average

    def derive_average(self, total: float | None, quantity: float | None) -> float | None:
        if not _positive(total, quantity):
            return None
        return total / quantity

    def drivers_for(self, target: FieldId) -> tuple[FieldId, FieldId]:
        """The two fields `target` is computed from."""
        return tuple(f for f in self.fields if f != target)

    def solve(self, target: FieldId, values: dict[FieldId, float | None]) -> float | None:
        """Compute `target` from the other two entries of `values`."""
        average = values.get(FieldId.AVERAGE_PRICE)
        quantity = values.get(FieldId.QUANTITY)
        total = values.get(FieldId.TOTAL_PRICE)

        if target == FieldId.TOTAL_PRICE:
            return self.derive_total(average, quantity)
        if target == FieldId.QUANTITY:
            return self.derive_quantity(average, total)
        if target == FieldId.AVERAGE_PRICE:
            return self.derive_average(total, quantity)
        raise ValueError(f"Unknown field: {target}")


# Global instance
price_quantity_total_rule = PriceQuantityTotalRule()
