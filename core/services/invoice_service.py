"""
Invoice service: the invoice lifecycle engine.

Holds the loaded invoice list in memory and keeps it in step with the record
store. Every mutation goes to the store first and is applied to memory only
once the store has confirmed it, except delete, which is optimistic and
rolled back on failure.

Status is derived from total and amount paid:

    UNPAID ──payment──▶ PARTIALLY_PAID ──payment──▶ PAID
       └──────────────payment (settles)──────────────┘

There is no void or cancel state; an invoice is hard-deleted instead.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable
from uuid import uuid4

from clients.record_store import RecordStore
from core.config import BillingConfig
from core.event_bus import EventBus
from core.events import (
    InvoiceCreated,
    InvoiceDeleted,
    InvoicePaid,
    OverpaymentCapped,
    PaymentRecorded,
)
from core.exceptions import ValidationError
from core.models import Invoice, InvoiceCreate, PaymentStatus, compute_balance, payment_status
from core.optimistic import optimistic_update
from utils.timezone import now_utc, today_in

logger = logging.getLogger(__name__)

_ENTITY = "invoice"


def parse_amount(amount) -> Decimal:
    """
    Coerce a payment amount to a positive, finite Decimal.

    Raises:
        ValidationError: If the amount is non-numeric, NaN, infinite, zero or negative
    """
    if isinstance(amount, bool) or amount is None:
        raise ValidationError(f"Payment amount must be a number, got {amount!r}")

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Payment amount must be a number, got {amount!r}")

    if not value.is_finite():
        raise ValidationError("Payment amount must be finite")
    if value <= 0:
        raise ValidationError("Payment amount must be greater than zero")
    return value


class InvoiceService:
    """Service for invoice operations."""

    def __init__(
        self,
        store: RecordStore,
        event_bus: EventBus,
        config: BillingConfig | None = None,
        clock: Callable[[], date] | None = None,
    ):
        self.store = store
        self.event_bus = event_bus
        self.config = config or BillingConfig()
        self._clock = clock or (lambda: today_in(self.config.timezone))
        self._invoices: list[Invoice] = []

    def today(self) -> date:
        """Business calendar day."""
        return self._clock()

    # === Reads ===

    def refresh(self) -> list[Invoice]:
        """
        Reload invoices from the store, newest first.

        Raises:
            SchemaMissingError: If the invoices table does not exist
        """
        rows = self.store.get(_ENTITY)
        self._invoices = [Invoice.model_validate(row) for row in rows]
        logger.info(f"Loaded {len(self._invoices)} invoices")
        return self.list_all()

    def clear(self) -> None:
        self._invoices = []

    def list_all(self) -> list[Invoice]:
        """Snapshot of the loaded invoices."""
        return list(self._invoices)

    def search(self, query: str) -> list[Invoice]:
        """
        Search loaded invoices by customer name or invoice number.

        Case-insensitive partial match; a blank query returns everything.

        Args:
            query: Search string

        Returns:
            Matching invoices, newest first
        """
        needle = query.strip().lower()
        return [
            invoice for invoice in self._invoices
            if needle in invoice.customer_name.lower()
            or needle in invoice.invoice_number.lower()
        ]

    def get_by_id(self, invoice_id: str) -> Invoice | None:
        for invoice in self._invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    def _require(self, invoice_id: str) -> Invoice:
        invoice = self.get_by_id(invoice_id)
        if invoice is None:
            raise ValueError(f"Invoice {invoice_id} not found")
        return invoice

    def _replace(self, updated: Invoice) -> None:
        for index, invoice in enumerate(self._invoices):
            if invoice.id == updated.id:
                self._invoices[index] = updated
                return

    # === Creation ===

    def _generate_invoice_number(self) -> str:
        """
        Generate an invoice number unique among the loaded invoices.

        Format: INV-NNNNNN, the last six digits of the millisecond clock,
        bumped by one until free.
        """
        prefix = self.config.invoice_number_prefix
        taken = {invoice.invoice_number for invoice in self._invoices}
        sequence = int(now_utc().timestamp() * 1000) % 1_000_000

        number = f"{prefix}{sequence:06d}"
        while number in taken:
            sequence = (sequence + 1) % 1_000_000
            number = f"{prefix}{sequence:06d}"
        return number

    def create(self, data: InvoiceCreate) -> Invoice:
        """
        Finalize a draft into a stored invoice.

        Args:
            data: Draft contents; line items are frozen from here on

        Returns:
            Created invoice, UNPAID with nothing paid

        Raises:
            ValidationError: If customer name is blank or there are no items
            StoreError: If the insert fails (nothing is added to memory)
        """
        if not data.customer_name.strip():
            raise ValidationError("Customer name is required")
        if not data.items:
            raise ValidationError("At least one line item is required")

        date_issued = data.date_issued or self.today()
        tax_rate = data.tax_rate if data.tax_rate is not None else self.config.default_tax_rate

        invoice = Invoice(
            id=str(uuid4()),
            invoice_number=self._generate_invoice_number(),
            customer_id=data.customer_id,
            customer_name=data.customer_name.strip(),
            customer_email=data.customer_email or None,
            customer_phone=data.customer_phone or None,
            customer_address=data.customer_address or None,
            company=data.company,
            items=data.items,
            tax_rate=tax_rate,
            amount_paid=Decimal("0"),
            status=PaymentStatus.UNPAID,
            date_issued=date_issued,
            due_date=data.due_date or date_issued,
            notes=data.notes,
            created_by=data.created_by,
        )

        # Always None here, and older schemas have no such column
        self.store.insert(_ENTITY, invoice.to_record(exclude={"last_reminder_sent"}))
        self._invoices.insert(0, invoice)

        logger.info(
            f"Invoice {invoice.invoice_number} created for {invoice.customer_name}: "
            f"total {invoice.total}"
        )
        self.event_bus.publish(InvoiceCreated.create(invoice=invoice))

        return invoice

    # === Payments ===

    def record_payment(self, invoice_id: str, amount) -> Invoice:
        """
        Record a payment on an invoice.

        Amount paid is capped at the total; anything above it is reported
        through an OverpaymentCapped event and otherwise dropped.

        Args:
            invoice_id: Invoice ID
            amount: Payment amount (Decimal, int, float or numeric string)

        Returns:
            Updated invoice (status PARTIALLY_PAID or PAID)

        Raises:
            ValidationError: If amount is not a positive finite number
            ValueError: If invoice not found
            StoreError: If the store rejects the update (memory unchanged)
        """
        value = parse_amount(amount)
        current = self._require(invoice_id)

        total = current.total
        uncapped = current.amount_paid + value
        new_paid = min(uncapped, total)
        new_balance = compute_balance(total, new_paid)
        new_status = payment_status(total, new_paid, self.config.paid_tolerance)
        if uncapped > total:
            logger.warning(
                f"Payment on {current.invoice_number} exceeds the balance by {uncapped - total}; capped at total"
            )

        self.store.update(
            _ENTITY,
            invoice_id,
            {
                "amount_paid": str(new_paid),
                "balance_due": str(new_balance),
                "status": new_status.value,
            },
        )

        updated = current.model_copy(update={"amount_paid": new_paid, "status": new_status})
        self._replace(updated)

        logger.info(
            f"Payment of {value} recorded on {current.invoice_number}: "
            f"{current.status.value} -> {new_status.value}, balance {new_balance}"
        )

        self.event_bus.publish(PaymentRecorded.create(invoice=updated, amount=value))
        if uncapped > total:
            self.event_bus.publish(OverpaymentCapped.create(invoice=updated, excess=uncapped - total))
        if new_status == PaymentStatus.PAID and current.status != PaymentStatus.PAID:
            self.event_bus.publish(InvoicePaid.create(invoice=updated))

        return updated

    # === Deletion ===

    def delete(self, invoice_id: str) -> None:
        """
        Delete an invoice, removing it from memory before the store confirms.

        Raises:
            ValueError: If invoice not found
            StoreError: If the store delete fails; the invoice is put back
                at its original position
        """
        current = self._require(invoice_id)
        index = self._invoices.index(current)

        with optimistic_update(self._invoices, "invoices") as invoices:
            del invoices[index]
            self.store.delete(_ENTITY, invoice_id)

        logger.info(f"Invoice {current.invoice_number} deleted")
        self.event_bus.publish(InvoiceDeleted.create(invoice=current))

    # === Reminders ===

    def mark_reminder_sent(self, invoice_id: str, day: date) -> Invoice:
        """
        Persist last_reminder_sent for one invoice.

        Only that column is written. ColumnMissingError from the store is
        left to the caller (the degraded-mode controller).

        Raises:
            ValueError: If invoice not found
            StoreError: If the store rejects the update (memory unchanged)
        """
        current = self._require(invoice_id)
        self.store.update(_ENTITY, invoice_id, {"last_reminder_sent": day.isoformat()})

        updated = current.model_copy(update={"last_reminder_sent": day})
        self._replace(updated)
        return updated
