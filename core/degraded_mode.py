"""
Degraded-mode controller for reminder tracking.

Older databases have no invoices.last_reminder_sent column. The first update
that fails with ColumnMissingError (or SchemaMissingError, when the table
itself has gone) flips this controller into local tracking: from then
on reminder dates are read from and written to an in-memory map and the
store is never asked about that field again. The switch lasts for the
lifetime of the process and is not persisted.
"""

import logging
from datetime import date
from typing import Callable

from clients.record_store import ColumnMissingError, SchemaMissingError
from core.event_bus import EventBus
from core.events import LocalTrackingEnabled

logger = logging.getLogger(__name__)


class DegradedModeController:
    """Owns the local-tracking flag and the in-memory reminder map."""

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus
        self.local_tracking = False
        self.local_reminders: dict[str, date] = {}

    def last_reminder_sent(self, invoice) -> date | None:
        """Reminder date for an invoice from whichever source is active."""
        if self.local_tracking:
            return self.local_reminders.get(invoice.id)
        return invoice.last_reminder_sent

    def mark_reminder_sent(
        self,
        invoice_id: str,
        day: date,
        persist: Callable[[str, date], None],
    ) -> bool:
        """
        Record that a reminder went out on `day`.

        Args:
            invoice_id: Invoice the reminder was for
            day: Calendar day of the reminder
            persist: Writes last_reminder_sent to the store

        Returns:
            True if the date was kept locally, False if the store accepted it

        Raises:
            StoreError: Any store failure other than a missing column or table
        """
        if self.local_tracking:
            self.local_reminders[invoice_id] = day
            return True

        try:
            persist(invoice_id, day)
        except (ColumnMissingError, SchemaMissingError) as e:
            self.enable_local_tracking(invoice_id, day, reason=str(e))
            return True

        return False

    def enable_local_tracking(self, invoice_id: str, day: date, reason: str = "") -> None:
        """Switch to local tracking (idempotent) and record `day` in the map."""
        self.local_reminders[invoice_id] = day
        if self.local_tracking:
            return

        self.local_tracking = True
        logger.warning(
            f"last_reminder_sent unavailable in store, tracking reminders in memory: {reason}"
        )
        if self.event_bus is not None:
            self.event_bus.publish(LocalTrackingEnabled.create(invoice_id, day))

    def status(self) -> dict:
        return {
            "local_tracking": self.local_tracking,
            "tracked_invoices": len(self.local_reminders),
        }
