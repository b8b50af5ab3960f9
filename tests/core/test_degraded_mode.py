"""Tests for DegradedModeController."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from clients.record_store import ColumnMissingError, PersistenceError, SchemaMissingError
from core.degraded_mode import DegradedModeController
from core.events import LocalTrackingEnabled
from core.models import Invoice


@pytest.fixture
def controller(event_bus):
    return DegradedModeController(event_bus)


@pytest.fixture
def _invoice(invoice_record, today):
    return Invoice.model_validate(
        invoice_record("inv-dm", last_reminder_sent=(today - timedelta(days=1)).isoformat())
    )


def _missing_column(*args):
    raise ColumnMissingError("no column", "invoice", column="last_reminder_sent")


class TestPersistedMode:

    def test_starts_in_persisted_mode(self, controller):
        assert controller.local_tracking is False
        assert controller.local_reminders == {}

    def test_reads_date_from_invoice(self, controller, _invoice, today):
        assert controller.last_reminder_sent(_invoice) == today - timedelta(days=1)

    def test_successful_persist_returns_false(self, controller, today):
        persist = Mock()

        assert controller.mark_reminder_sent("inv-dm", today, persist) is False
        persist.assert_called_once_with("inv-dm", today)
        assert controller.local_reminders == {}

    def test_other_store_errors_propagate(self, controller, today):
        persist = Mock(side_effect=PersistenceError("timeout", "invoice"))

        with pytest.raises(PersistenceError):
            controller.mark_reminder_sent("inv-dm", today, persist)

        assert controller.local_tracking is False


class TestSwitchToLocal:

    def test_missing_column_switches_and_records(self, controller, today):
        tracked_locally = controller.mark_reminder_sent("inv-dm", today, _missing_column)

        assert tracked_locally is True
        assert controller.local_tracking is True
        assert controller.local_reminders == {"inv-dm": today}

    def test_missing_table_switches_and_records(self, controller, today):
        persist = Mock(side_effect=SchemaMissingError("Table 'invoices' does not exist", "invoice"))

        assert controller.mark_reminder_sent("inv-dm", today, persist) is True
        assert controller.local_tracking is True
        assert controller.local_reminders == {"inv-dm": today}

    def test_switch_publishes_once(self, controller, today, published):
        controller.mark_reminder_sent("a", today, _missing_column)
        controller.mark_reminder_sent("b", today, _missing_column)

        events = [e for e in published if isinstance(e, LocalTrackingEnabled)]
        assert len(events) == 1
        assert events[0].invoice_id == "a"

    def test_local_mode_bypasses_store(self, controller, today):
        controller.mark_reminder_sent("a", today, _missing_column)
        persist = Mock()

        controller.mark_reminder_sent("b", today, persist)

        persist.assert_not_called()
        assert controller.local_reminders["b"] == today

    def test_local_mode_reads_from_map(self, controller, _invoice, today):
        controller.enable_local_tracking("other", today)

        # Stored date on the invoice is ignored once local
        assert controller.last_reminder_sent(_invoice) is None

        controller.mark_reminder_sent(_invoice.id, today, Mock())
        assert controller.last_reminder_sent(_invoice) == today

    def test_mode_is_sticky(self, controller, today):
        controller.enable_local_tracking("a", today)
        controller.mark_reminder_sent("b", today + timedelta(days=1), Mock())

        assert controller.local_tracking is True

    def test_status(self, controller, today):
        controller.enable_local_tracking("a", today)

        assert controller.status() == {"local_tracking": True, "tracked_invoices": 1}

    def test_works_without_event_bus(self, today):
        controller = DegradedModeController()

        assert controller.mark_reminder_sent("a", today, _missing_column) is True
