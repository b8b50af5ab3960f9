"""
Reminder service: decides which invoices get a payment reminder today.

An unpaid invoice is due for an automatic reminder when it is overdue, or
when today is exactly `reminder_lead_days` before its due date, and no
reminder has gone out today. Once sent, last_reminder_sent is stamped with
today's date; that stamp is the only thing that keeps a second scan on the
same day from sending again.

Reminder dates go through the DegradedModeController, which keeps them in
memory when the store has no last_reminder_sent column.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable

from clients.record_store import StoreError
from core.config import BillingConfig
from core.degraded_mode import DegradedModeController
from core.event_bus import EventBus
from core.events import ReminderSent
from core.models import Invoice, PaymentStatus
from core.services.drafting_service import DraftingService
from core.services.invoice_service import InvoiceService
from utils.timezone import days_between

logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """Outcome of one automatic scan."""
    day: date
    skipped: bool = False
    reason: str | None = None
    sent: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    local_tracking: bool = False


@dataclass
class ReminderDispatch:
    """A manual reminder that was drafted and recorded."""
    invoice_id: str
    recipient: str
    message: str
    tracked_locally: bool


class ReminderService:
    """Automatic and manual payment reminders."""

    def __init__(
        self,
        invoices: InvoiceService,
        degraded_mode: DegradedModeController,
        drafting: DraftingService,
        event_bus: EventBus,
        config: BillingConfig | None = None,
        clock: Callable[[], date] | None = None,
    ):
        self.invoices = invoices
        self.degraded_mode = degraded_mode
        self.drafting = drafting
        self.event_bus = event_bus
        self.config = config or BillingConfig()
        self._clock = clock or invoices.today
        self._running = False
        self._activity: deque[str] = deque(maxlen=self.config.activity_log_size)
        # Set by the workspace after each load
        self.data_source_available = True

    def today(self) -> date:
        return self._clock()

    # === Queries ===

    def candidates(self) -> list[Invoice]:
        """Unpaid invoices due within the lookahead window or already overdue, soonest first."""
        horizon = self.today() + timedelta(days=self.config.candidate_lookahead_days)
        found = [
            invoice for invoice in self.invoices.list_all()
            if invoice.status != PaymentStatus.PAID and invoice.due_date <= horizon
        ]
        return sorted(found, key=lambda invoice: invoice.due_date)

    def last_sent(self, invoice: Invoice) -> date | None:
        return self.degraded_mode.last_reminder_sent(invoice)

    def already_sent_today(self, invoice: Invoice) -> bool:
        return self.last_sent(invoice) == self.today()

    def is_due_for_auto_reminder(self, invoice: Invoice, today: date | None = None) -> bool:
        """Whether the automatic scan should remind this invoice today."""
        today = today or self.today()
        if invoice.status == PaymentStatus.PAID:
            return False

        is_overdue = invoice.due_date < today
        is_lead_day = invoice.due_date - timedelta(days=self.config.reminder_lead_days) == today
        needs_reminder = self.last_sent(invoice) != today

        return (is_overdue or is_lead_day) and needs_reminder

    def activity(self) -> list[str]:
        """Recent reminder activity, newest first."""
        return list(self._activity)

    def _log_activity(self, line: str) -> None:
        self._activity.appendleft(line)

    # === Dispatch ===

    def _record(self, invoice: Invoice, today: date) -> bool:
        """Stamp today's reminder; True when it had to be kept locally."""
        was_local = self.degraded_mode.local_tracking
        tracked_locally = self.degraded_mode.mark_reminder_sent(
            invoice.id, today, self.invoices.mark_reminder_sent
        )
        if tracked_locally and not was_local:
            self._log_activity("Switch: tracking auto-reminders locally.")
        return tracked_locally

    def _draft(self, invoice: Invoice, today: date) -> str:
        return self.drafting.draft_reminder_text(
            invoice.customer_name,
            invoice.invoice_number,
            invoice.balance_due,
            days_between(today, invoice.due_date),
        )

    def run_automatic_scan(self) -> ScanReport:
        """
        Send today's automatic reminders.

        Skipped (not queued) while another scan is running, when no invoices
        are loaded, or when the data source is unavailable. A store failure
        on one invoice is reported and the scan carries on with the rest.

        Returns:
            ScanReport listing sent and failed invoice IDs
        """
        today = self.today()

        if self._running:
            return ScanReport(day=today, skipped=True, reason="already running")
        if not self.data_source_available:
            return ScanReport(day=today, skipped=True, reason="data source unavailable")

        invoices = self.invoices.list_all()
        if not invoices:
            return ScanReport(day=today, skipped=True, reason="no invoices")

        self._running = True
        report = ScanReport(day=today)
        try:
            for invoice in invoices:
                if not self.is_due_for_auto_reminder(invoice, today):
                    continue

                try:
                    tracked_locally = self._record(invoice, today)
                except StoreError as e:
                    logger.error(f"Reminder for {invoice.invoice_number} not recorded: {e}")
                    report.failed[invoice.id] = str(e)
                    self._log_activity(f"Failed for {invoice.invoice_number}: {e}")
                    continue

                message = self._draft(invoice, today)
                report.sent.append(invoice.id)
                if tracked_locally:
                    self._log_activity(f"[Auto-Mail] Proactive reminder triggered for {invoice.customer_name}")
                else:
                    self._log_activity(
                        f"[Auto-Mail] Reminder queued for {invoice.customer_name} "
                        f"(Inv: {invoice.invoice_number})"
                    )
                logger.info(f"Automatic reminder sent for {invoice.invoice_number}")
                self.event_bus.publish(
                    ReminderSent.create(invoice=self._current(invoice), message=message, automatic=True)
                )
        finally:
            self._running = False

        report.local_tracking = self.degraded_mode.local_tracking
        if report.sent or report.failed:
            logger.info(
                f"Reminder scan for {today}: {len(report.sent)} sent, {len(report.failed)} failed"
            )
        return report

    def send_manual_reminder(self, invoice_id: str) -> ReminderDispatch:
        """
        Draft and send a reminder for one invoice regardless of schedule.

        Raises:
            ValueError: If invoice not found
            StoreError: If recording the reminder fails for a reason other
                than a missing column
        """
        invoice = self.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise ValueError(f"Invoice {invoice_id} not found")

        today = self.today()
        message = self._draft(invoice, today)
        tracked_locally = self._record(invoice, today)

        recipient = invoice.customer_email or invoice.customer_name
        self._log_activity(f'[Manual-AI] Sent to {recipient}: "{message[:30]}..."')
        logger.info(f"Manual reminder sent for {invoice.invoice_number} to {recipient}")

        self.event_bus.publish(
            ReminderSent.create(invoice=self._current(invoice), message=message, automatic=False)
        )
        return ReminderDispatch(
            invoice_id=invoice.id,
            recipient=recipient,
            message=message,
            tracked_locally=tracked_locally,
        )

    def _current(self, invoice: Invoice) -> Invoice:
        return self.invoices.get_by_id(invoice.id) or invoice
