"""Dashboard figures and the due-date calendar, computed from loaded invoices."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.models import Invoice, PaymentStatus
from core.services.drafting_service import DraftingService
from core.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


@dataclass
class DashboardSummary:
    revenue: Decimal
    outstanding: Decimal
    paid_count: int
    overdue_count: int
    total_count: int

    def describe(self, currency_symbol: str = "€") -> str:
        """One-line summary handed to the insights generator."""
        return (
            f"Revenue: {currency_symbol}{self.revenue:.2f}, "
            f"Outstanding: {currency_symbol}{self.outstanding:.2f}, "
            f"Paid: {self.paid_count}, Total: {self.total_count}, "
            f"Overdue: {self.overdue_count}."
        )


@dataclass
class CalendarDay:
    day: date
    invoices: list[Invoice] = field(default_factory=list)
    total: Decimal = Decimal("0")
    balance_due: Decimal = Decimal("0")
    has_overdue: bool = False


class SummaryService:
    """Read-only figures over the invoice list."""

    def __init__(self, invoices: InvoiceService, drafting: DraftingService):
        self.invoices = invoices
        self.drafting = drafting

    def summary(self) -> DashboardSummary:
        today = self.invoices.today()
        invoices = self.invoices.list_all()
        return DashboardSummary(
            revenue=sum((i.amount_paid for i in invoices), Decimal("0")),
            outstanding=sum((i.balance_due for i in invoices), Decimal("0")),
            paid_count=sum(1 for i in invoices if i.status == PaymentStatus.PAID),
            overdue_count=sum(1 for i in invoices if i.is_overdue(today)),
            total_count=len(invoices),
        )

    def group_by_due_date(self, start: date | None = None, end: date | None = None) -> list[CalendarDay]:
        """
        Invoices bucketed by due date, earliest day first.

        Args:
            start: First day to include (inclusive), unbounded if None
            end: Last day to include (inclusive), unbounded if None
        """
        today = self.invoices.today()
        buckets: dict[date, CalendarDay] = {}

        for invoice in self.invoices.list_all():
            due = invoice.due_date
            if start is not None and due < start:
                continue
            if end is not None and due > end:
                continue

            bucket = buckets.setdefault(due, CalendarDay(day=due))
            bucket.invoices.append(invoice)
            bucket.total += invoice.total
            bucket.balance_due += invoice.balance_due
            bucket.has_overdue = bucket.has_overdue or invoice.is_overdue(today)

        return [buckets[day] for day in sorted(buckets)]

    def insights(self) -> str:
        """Generated commentary on the current figures."""
        if not self.drafting.enabled or not self.invoices.list_all():
            return "Collect more data to generate AI insights."
        summary = self.summary().describe(self.drafting.config.currency_symbol)
        return self.drafting.analyze_trends(summary)
