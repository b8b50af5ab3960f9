"""
Domain events for billing.

Immutable event objects that represent state changes in the billing domain.
A service publishes what happened; handlers (email receipts, reminder
emails) react without the publisher knowing who's listening.

Event Categories:
- InvoiceEvent: Invoice lifecycle (create, payment, paid, overpayment, delete)
- ReminderEvent: Reminder dispatch and the switch to local tracking

Events carry the full domain object so handlers don't need to re-fetch state.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class BillingEvent:
    """Base class for all billing domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceEvent(BillingEvent):
    """Events related to invoice lifecycle."""
    pass


@dataclass(frozen=True)
class InvoiceCreated(InvoiceEvent):
    """A finalized invoice was stored."""
    invoice: Any = None  # Invoice; Any avoids a circular import

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCreated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class PaymentRecorded(InvoiceEvent):
    """A payment was applied to an invoice."""
    invoice: Any = None
    amount: Decimal = Decimal("0")

    @classmethod
    def create(cls, invoice: Any, amount: Decimal) -> "PaymentRecorded":
        return cls(invoice=invoice, amount=amount)


@dataclass(frozen=True)
class InvoicePaid(InvoiceEvent):
    """Invoice became fully paid."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoicePaid":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class OverpaymentCapped(InvoiceEvent):
    """A payment exceeded the balance; the excess was not recorded."""
    invoice: Any = None
    excess: Decimal = Decimal("0")

    @classmethod
    def create(cls, invoice: Any, excess: Decimal) -> "OverpaymentCapped":
        return cls(invoice=invoice, excess=excess)


@dataclass(frozen=True)
class InvoiceDeleted(InvoiceEvent):
    """Invoice was removed from the store."""
    invoice: Any = None

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceDeleted":
        return cls(invoice=invoice)


# =============================================================================
# REMINDER EVENTS
# =============================================================================


@dataclass(frozen=True)
class ReminderEvent(BillingEvent):
    """Events related to payment reminders."""
    pass


@dataclass(frozen=True)
class ReminderSent(ReminderEvent):
    """A payment reminder was dispatched and recorded."""
    invoice: Any = None
    message: str = ""
    automatic: bool = True

    @classmethod
    def create(cls, invoice: Any, message: str, automatic: bool = True) -> "ReminderSent":
        return cls(invoice=invoice, message=message, automatic=automatic)


@dataclass(frozen=True)
class LocalTrackingEnabled(ReminderEvent):
    """The store lacks last_reminder_sent; reminder dates are now kept in memory."""
    invoice_id: str = ""
    day: date | None = None

    @classmethod
    def create(cls, invoice_id: str, day: date) -> "LocalTrackingEnabled":
        return cls(invoice_id=invoice_id, day=day)
