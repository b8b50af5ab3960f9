"""Tests for SummaryService."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import Mock

import pytest

from core.services.drafting_service import DraftingService
from core.services.invoice_service import InvoiceService
from core.services.summary_service import SummaryService


@pytest.fixture
def invoices(store, event_bus, config, clock, invoice_record, today):
    store.seed("invoice", [
        invoice_record("paid", amount_paid="30.75", status="PAID",
                       due_date=(today - timedelta(days=3)).isoformat()),
        invoice_record("part", amount_paid="10", status="PARTIALLY_PAID",
                       due_date=(today - timedelta(days=1)).isoformat()),
        invoice_record("open", due_date=(today + timedelta(days=5)).isoformat()),
        invoice_record("open-2", due_date=(today + timedelta(days=5)).isoformat()),
    ])
    svc = InvoiceService(store, event_bus, config, clock)
    svc.refresh()
    return svc


class TestSummary:

    def test_figures(self, invoices):
        summary = SummaryService(invoices, DraftingService()).summary()

        assert summary.revenue == Decimal("40.75")
        assert summary.outstanding == Decimal("20.75") + Decimal("30.75") * 2
        assert summary.paid_count == 1
        assert summary.overdue_count == 1
        assert summary.total_count == 4

    def test_describe(self, invoices):
        line = SummaryService(invoices, DraftingService()).summary().describe()

        assert line == "Revenue: €40.75, Outstanding: €82.25, Paid: 1, Total: 4, Overdue: 1."


class TestCalendar:

    def test_groups_by_due_date(self, invoices, today):
        days = SummaryService(invoices, DraftingService()).group_by_due_date()

        assert [d.day for d in days] == [
            today - timedelta(days=3), today - timedelta(days=1), today + timedelta(days=5),
        ]
        assert len(days[2].invoices) == 2
        assert days[2].total == Decimal("61.50")
        assert days[1].has_overdue is True
        assert days[0].has_overdue is False

    def test_range_filter(self, invoices, today):
        days = SummaryService(invoices, DraftingService()).group_by_due_date(start=today, end=today + timedelta(days=7))

        assert [d.day for d in days] == [today + timedelta(days=5)]


class TestInsights:

    def test_without_llm(self, invoices):
        assert SummaryService(invoices, DraftingService()).insights() == "Collect more data to generate AI insights."

    def test_passes_summary_line(self, invoices):
        drafting = DraftingService(Mock())
        drafting.analyze_trends = Mock(return_value="- Sales are up")

        result = SummaryService(invoices, drafting).insights()

        assert result == "- Sales are up"
        assert drafting.analyze_trends.call_args.args[0].startswith("Revenue: €40.75")
