"""Field derivation engine.

Keeps average price, quantity and total price of one holding consistent while
the user edits them one keystroke at a time.

Each change event runs a small state machine:

    IDLE --change--> DERIVING   both drivers of the target are valid
    IDLE --change--> CLEARED    a driver is empty, unparseable or <= 0; a
                                derived target is emptied, user-typed text kept
    DERIVING / CLEARED --> IDLE once the target field has been written

Target selection:
    - average price is always a driver
    - between quantity and total, the field the user edited most recently is
      the driver and the other one is derived
    - editing average price re-derives whichever of quantity/total the user
      did not edit last (total if neither has been edited)

Writes made by the engine carry ChangeOrigin.ENGINE. They never trigger
another derivation and never count as the user's last edit, so a derived
value cannot feed back into its own sources.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from investmate.services.derivation import (
    FieldId,
    PriceQuantityTotalRule,
    price_quantity_total_rule,
)
from investmate.services.numeric_text import format_number, parse_number

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    DERIVING = "deriving"
    CLEARED = "cleared"


class ChangeOrigin(str, Enum):
    USER = "user"
    ENGINE = "engine"


class ReadOnlyTripleError(Exception):
    """Raised when a user edit targets a read-only field triple."""


@dataclass
class NumericField:
    raw_text: str = ""
    value: float | None = None
    origin: ChangeOrigin = ChangeOrigin.USER

    def assign(self, raw_text: str, origin: ChangeOrigin) -> None:
        self.raw_text = raw_text
        self.value = parse_number(raw_text)
        self.origin = origin


@dataclass(frozen=True)
class FieldChange:
    field_id: FieldId
    raw_text: str
    origin: ChangeOrigin = ChangeOrigin.USER


@dataclass(frozen=True)
class FieldUpdate:
    field_id: FieldId
    display_text: str


@dataclass
class FieldTriple:
    average_price: NumericField = field(default_factory=NumericField)
    quantity: NumericField = field(default_factory=NumericField)
    total_price: NumericField = field(default_factory=NumericField)

    def __getitem__(self, field_id: FieldId) -> NumericField:
        return getattr(self, FieldId(field_id).value)

    def values(self) -> dict[FieldId, float | None]:
        return {f: self[f].value for f in FieldId}

    def texts(self) -> dict[FieldId, str]:
        return {f: self[f].raw_text for f in FieldId}


class FieldDerivationEngine:
    """Derives the missing member of one FieldTriple from change events.

    One engine per editing context. Events must be delivered one at a time;
    `apply` runs to completion before the next event is accepted.
    """

    def __init__(
        self,
        rule: PriceQuantityTotalRule | None = None,
        read_only: bool = False,
    ):
        self.rule = rule or price_quantity_total_rule
        self.read_only = read_only
        self.triple = FieldTriple()
        self.state = EngineState.IDLE
        self.last_state = EngineState.IDLE
        # Most recent user edit among quantity/total
        self._last_driver: FieldId | None = None

    @property
    def last_driver(self) -> FieldId | None:
        return self._last_driver

    def apply(self, change: FieldChange) -> list[FieldUpdate]:
        """Process one change event and return the display updates it causes."""
        field_id = FieldId(change.field_id)
        target_field = self.triple[field_id]

        if change.origin == ChangeOrigin.ENGINE:
            target_field.assign(change.raw_text, ChangeOrigin.ENGINE)
            self.last_state = EngineState.IDLE
            return []

        if self.read_only:
            raise ReadOnlyTripleError(f"Field {field_id.value} is read-only")

        target_field.assign(change.raw_text, ChangeOrigin.USER)
        if field_id != FieldId.AVERAGE_PRICE:
            self._last_driver = field_id

        return self._derive(self._select_target(field_id))

    def edit(self, field_id: FieldId | str, raw_text: str) -> list[FieldUpdate]:
        """Shortcut for a user edit."""
        return self.apply(FieldChange(field_id=FieldId(field_id), raw_text=raw_text))

    def seed(
        self,
        average_price: float | None,
        quantity: float | None,
        total_price: float | None = None,
    ) -> list[FieldUpdate]:
        """Fill the triple from stored figures. Total is derived when omitted."""
        seeded = {
            FieldId.AVERAGE_PRICE: average_price,
            FieldId.QUANTITY: quantity,
            FieldId.TOTAL_PRICE: total_price,
        }
        updates = []
        for field_id, value in seeded.items():
            text = format_number(value) if value is not None else ""
            updates.extend(self._write(field_id, text))
        self._last_driver = None

        if total_price is None:
            updates.extend(self._derive(FieldId.TOTAL_PRICE))
        return updates

    def snapshot(self) -> dict[str, str]:
        """Current display text of every field, keyed by field id."""
        return {f.value: text for f, text in self.triple.texts().items()}

    def _select_target(self, edited: FieldId) -> FieldId:
        if edited == FieldId.QUANTITY:
            return FieldId.TOTAL_PRICE
        if edited == FieldId.TOTAL_PRICE:
            return FieldId.QUANTITY
        if self._last_driver == FieldId.TOTAL_PRICE:
            return FieldId.QUANTITY
        return FieldId.TOTAL_PRICE

    def _derive(self, target: FieldId) -> list[FieldUpdate]:
        result = self.rule.solve(target, self.triple.values())
        if result is None:
            self.state = EngineState.CLEARED
            text = ""
        else:
            self.state = EngineState.DERIVING
            text = format_number(result)

        logger.debug(
            f"{self.state.value}: {target.value}={text!r} "
            f"from {[d.value for d in self.rule.drivers_for(target)]}"
        )
        # Clearing only removes derived values, never text the user typed
        if result is None and self.triple[target].origin == ChangeOrigin.USER:
            updates = []
        else:
            updates = self._write(target, text)
        self.last_state = self.state
        self.state = EngineState.IDLE
        return updates

    def _write(self, field_id: FieldId, text: str) -> list[FieldUpdate]:
        numeric_field = self.triple[field_id]
        changed = numeric_field.raw_text != text
        numeric_field.assign(text, ChangeOrigin.ENGINE)
        if not changed:
            return []
        return [FieldUpdate(field_id=field_id, display_text=text)]
