"""Billing configuration."""

from decimal import Decimal

from pydantic import BaseModel, Field


class BillingConfig(BaseModel):
    """
    Billing and reminder configuration.

    The reminder lead and the candidate lookahead are separate settings: the
    scheduler only auto-sends exactly `reminder_lead_days` before the due
    date, while the reminders panel lists everything due within
    `candidate_lookahead_days`.
    """

    # Company
    company_name: str = Field(
        default="Clonmel Glass & Mirrors",
        description="Trading name used in generated text",
    )
    currency_symbol: str = Field(
        default="€",
        description="Symbol prefixed to amounts in generated text",
        max_length=3,
    )

    # Money
    default_tax_rate: Decimal = Field(
        default=Decimal("23"),
        description="VAT percentage applied when a draft does not set one",
        ge=0,
        le=100,
    )
    paid_tolerance: Decimal = Field(
        default=Decimal("0.05"),
        description="Remaining balance at or below which an invoice counts as paid",
        ge=0,
    )
    invoice_number_prefix: str = Field(
        default="INV-",
        description="Prefix for generated invoice numbers",
        min_length=1,
        max_length=10,
    )

    # Reminders
    reminder_lead_days: int = Field(
        default=2,
        description="Days before the due date on which an automatic reminder goes out",
        ge=0,
        le=30,
    )
    candidate_lookahead_days: int = Field(
        default=3,
        description="Days ahead of today that the reminders panel looks",
        ge=0,
        le=60,
    )
    timezone: str = Field(
        default="Europe/Dublin",
        description="IANA zone that defines 'today' for reminders and overdue checks",
    )
    activity_log_size: int = Field(
        default=10,
        description="Reminder activity lines kept for display",
        ge=1,
        le=100,
    )

    # Message generator
    llm_model: str | None = Field(
        default=None,
        description="Override for the drafting model; Vault's model_name when unset",
    )
