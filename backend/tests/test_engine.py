"""Tests for the field derivation engine."""

import pytest
from investmate.services.derivation import FieldId
from investmate.services.engine import (
    ChangeOrigin,
    EngineState,
    FieldChange,
    FieldDerivationEngine,
    FieldUpdate,
    ReadOnlyTripleError,
)

AVG = FieldId.AVERAGE_PRICE
QTY = FieldId.QUANTITY
TOTAL = FieldId.TOTAL_PRICE


@pytest.fixture
def engine():
    return FieldDerivationEngine()


class TestDerivation:
    def test_total_from_average_and_quantity(self, engine):
        engine.edit(AVG, "10000")
        updates = engine.edit(QTY, "5")
        assert updates == [FieldUpdate(TOTAL, "50,000")]
        assert engine.last_state == EngineState.DERIVING
        assert engine.state == EngineState.IDLE

    def test_quantity_from_average_and_total(self, engine):
        engine.edit(AVG, "10000")
        updates = engine.edit(TOTAL, "50000")
        assert updates == [FieldUpdate(QTY, "5")]

    def test_grouped_input_is_accepted(self, engine):
        engine.edit(AVG, "10,000")
        assert engine.edit(TOTAL, "1,250,000") == [FieldUpdate(QTY, "125")]

    def test_fractional_quantity_is_rounded_for_display(self, engine):
        engine.edit(AVG, "3")
        engine.edit(TOTAL, "10")
        assert engine.snapshot()["quantity"] == "3.33"

    def test_average_edit_rederives_total_when_quantity_drives(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        updates = engine.edit(AVG, "12000")
        assert updates == [FieldUpdate(TOTAL, "60,000")]
        assert engine.snapshot()["quantity"] == "5"

    def test_average_edit_rederives_quantity_when_total_drives(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(TOTAL, "60000")
        updates = engine.edit(AVG, "12000")
        assert updates == [FieldUpdate(QTY, "5")]
        assert engine.snapshot()["total_price"] == "60000"

    def test_only_one_field_is_derived_per_event(self, engine):
        engine.edit(AVG, "100")
        engine.edit(QTY, "4")
        engine.edit(TOTAL, "1000")
        updates = engine.edit(AVG, "250")
        assert [u.field_id for u in updates] == [QTY]
        assert engine.snapshot() == {
            "average_price": "250",
            "quantity": "4",
            "total_price": "1000",
        }

    def test_unchanged_derived_text_emits_nothing(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        assert engine.edit(QTY, "5.0") == []
        assert engine.last_state == EngineState.DERIVING


class TestClearing:
    def test_zero_average_clears_total(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        updates = engine.edit(AVG, "0")
        assert updates == [FieldUpdate(TOTAL, "")]
        assert engine.last_state == EngineState.CLEARED

    def test_empty_average_clears_total(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        assert engine.edit(AVG, "") == [FieldUpdate(TOTAL, "")]

    def test_unparseable_average_clears_total(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        assert engine.edit(AVG, "10k") == [FieldUpdate(TOTAL, "")]

    def test_clearing_quantity_clears_derived_total(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        assert engine.edit(QTY, "") == [FieldUpdate(TOTAL, "")]
        assert engine.snapshot()["total_price"] == ""

    def test_clearing_total_clears_derived_quantity(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(TOTAL, "50000")
        assert engine.edit(TOTAL, "") == [FieldUpdate(QTY, "")]

    def test_zero_average_with_seeded_total_clears_it(self, engine):
        engine.seed(average_price=10000.0, quantity=5.0, total_price=50000.0)
        assert engine.snapshot()["total_price"] == "50,000"
        assert engine.edit(AVG, "0") == [FieldUpdate(TOTAL, "")]

    def test_recovers_after_clear(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        engine.edit(AVG, "")
        assert engine.edit(AVG, "2000") == [FieldUpdate(TOTAL, "10,000")]

    def test_user_typed_quantity_survives_undefined_derivation(self, engine):
        engine.edit(QTY, "5")
        updates = engine.edit(TOTAL, "50000")
        assert updates == []
        assert engine.last_state == EngineState.CLEARED
        assert engine.snapshot()["quantity"] == "5"
        # Once average arrives, the last-edited total drives
        assert engine.edit(AVG, "20000") == [FieldUpdate(QTY, "2.5")]

    def test_user_typed_total_survives_undefined_derivation(self, engine):
        engine.edit(TOTAL, "50000")
        assert engine.edit(QTY, "5") == []
        assert engine.snapshot()["total_price"] == "50000"

    def test_no_valid_pair_leaves_empty_fields_alone(self, engine):
        assert engine.edit(QTY, "5") == []
        assert engine.last_state == EngineState.CLEARED


class TestCyclePrevention:
    def test_committing_derived_text_makes_field_the_driver(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(TOTAL, "50000")
        assert engine.snapshot()["quantity"] == "5"
        # User confirms the derived quantity without changing it
        assert engine.edit(QTY, "5") == [FieldUpdate(TOTAL, "50,000")]
        assert engine.last_driver == QTY

        assert engine.edit(AVG, "20000") == [FieldUpdate(TOTAL, "100,000")]
        assert engine.snapshot()["quantity"] == "5"

    def test_engine_origin_change_does_not_derive(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        updates = engine.apply(FieldChange(TOTAL, "70,000", origin=ChangeOrigin.ENGINE))
        assert updates == []
        assert engine.snapshot()["quantity"] == "5"
        assert engine.last_driver == QTY

    def test_user_edit_of_derived_field_takes_over_as_driver(self, engine):
        engine.edit(AVG, "10000")
        engine.edit(QTY, "5")
        assert engine.edit(TOTAL, "70,000") == [FieldUpdate(QTY, "7")]
        assert engine.last_driver == TOTAL

    def test_keystroke_sequence_settles(self, engine):
        for text in ["1", "10", "100", "1000", "10000"]:
            engine.edit(AVG, text)
        for text in ["5", "50"]:
            engine.edit(QTY, text)
        assert engine.snapshot() == {
            "average_price": "10000",
            "quantity": "50",
            "total_price": "500,000",
        }


class TestSeedAndReadOnly:
    def test_seed_derives_total(self, engine):
        updates = engine.seed(average_price=10000.0, quantity=2.0)
        assert FieldUpdate(AVG, "10,000") in updates
        assert FieldUpdate(QTY, "2") in updates
        assert FieldUpdate(TOTAL, "20,000") in updates
        assert engine.last_driver is None

    def test_read_only_rejects_user_edits(self):
        engine = FieldDerivationEngine(read_only=True)
        engine.seed(average_price=100.0, quantity=3.0)
        with pytest.raises(ReadOnlyTripleError):
            engine.edit(QTY, "4")
        assert engine.snapshot()["quantity"] == "3"

    def test_field_id_accepts_plain_strings(self, engine):
        engine.edit("average_price", "50")
        assert engine.edit("quantity", "2") == [FieldUpdate(TOTAL, "100")]
