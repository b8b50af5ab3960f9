"""Invoice domain models.

Money is Decimal throughout. Subtotal, tax, total and balance are computed
from the line items and payments on every access; the values written to the
store are a convenience for reporting and are never read back.

Python attributes and store columns are snake_case. Serializing with
by_alias=True gives the camelCase field names the browser client uses
(invoiceNumber, balanceDue, ...).
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Balance at or below this counts as settled (rounding slack on card payments)
PAID_TOLERANCE = Decimal("0.05")

CAMEL_CASE = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


class PaymentStatus(str, Enum):
    """Invoice payment status."""

    UNPAID = "UNPAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"


class Company(str, Enum):
    """Trading name an invoice is issued under."""

    CLONMEL = "clonmel"
    MIRRORZONE = "mirrorzone"


def compute_balance(total: Decimal, amount_paid: Decimal) -> Decimal:
    """Outstanding amount, floored at zero."""
    return max(Decimal("0"), total - amount_paid)


def payment_status(
    total: Decimal,
    amount_paid: Decimal,
    tolerance: Decimal = PAID_TOLERANCE,
) -> PaymentStatus:
    """Status implied by a total and the amount paid against it."""
    if compute_balance(total, amount_paid) <= tolerance:
        return PaymentStatus.PAID
    if amount_paid > 0:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.UNPAID


def _coerce_date(value):
    """Stores hand back timestamps for date columns; keep the calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if value == "":
        return None
    return value


class InvoiceItem(BaseModel):
    """One line on an invoice. Quantity may be fractional (square metres)."""

    model_config = CAMEL_CASE

    id: str = Field(default_factory=lambda: str(uuid4()))
    product_id: str | None = None
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    unit: str | None = Field(None, max_length=20)

    @computed_field
    @property
    def total(self) -> Decimal:
        """Line total: quantity x unit price."""
        return self.quantity * self.unit_price


class InvoiceCreate(BaseModel):
    """A finalized invoice draft, as submitted by the invoice builder."""

    model_config = CAMEL_CASE

    customer_id: str | None = None
    customer_name: str = Field("", max_length=255)
    customer_email: str | None = Field(None, max_length=255)
    customer_phone: str | None = Field(None, max_length=50)
    customer_address: str | None = Field(None, max_length=500)
    company: Company = Company.CLONMEL
    items: list[InvoiceItem] = Field(default_factory=list)
    tax_rate: Decimal | None = Field(None, ge=0, le=100)
    date_issued: date | None = None
    due_date: date | None = None
    notes: str | None = Field(None, max_length=2000)
    created_by: str | None = None


class Invoice(BaseModel):
    """Full invoice entity as stored."""

    model_config = CAMEL_CASE

    id: str
    invoice_number: str
    customer_id: str | None = None
    customer_name: str
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_address: str | None = None
    company: Company = Company.CLONMEL
    items: list[InvoiceItem]
    tax_rate: Decimal
    amount_paid: Decimal = Decimal("0")
    status: PaymentStatus = PaymentStatus.UNPAID
    date_issued: date
    due_date: date
    notes: str | None = None
    created_by: str | None = None
    last_reminder_sent: date | None = None

    @field_validator("date_issued", "due_date", "last_reminder_sent", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return _coerce_date(v)

    @field_validator("invoice_number", "customer_name", mode="before")
    @classmethod
    def null_text_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("tax_rate", "amount_paid", mode="before")
    @classmethod
    def null_amount_to_zero(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("items", mode="before")
    @classmethod
    def null_items_to_empty(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def derive_status(self):
        # Stored status can lag behind amount_paid on rows written elsewhere
        self.status = payment_status(self.total, self.amount_paid)
        return self

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        """Sum of line totals."""
        return sum((item.total for item in self.items), Decimal("0"))

    @computed_field
    @property
    def tax_amount(self) -> Decimal:
        """VAT on the subtotal."""
        return self.subtotal * self.tax_rate / 100

    @computed_field
    @property
    def total(self) -> Decimal:
        """Subtotal plus tax."""
        return self.subtotal + self.tax_amount

    @computed_field
    @property
    def balance_due(self) -> Decimal:
        """Remaining amount to be paid, never negative."""
        return compute_balance(self.total, self.amount_paid)

    @property
    def is_paid(self) -> bool:
        """Whether invoice is fully paid."""
        return self.status == PaymentStatus.PAID

    def is_overdue(self, today: date) -> bool:
        """Unpaid and past its due date."""
        return not self.is_paid and self.due_date < today

    def to_record(self, exclude: set[str] | None = None) -> dict:
        """Snake_case, JSON-safe dict for the record store."""
        return self.model_dump(mode="json", exclude=exclude)
