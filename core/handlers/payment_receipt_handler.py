"""
Handler for PaymentRecorded events.

Sends the customer a short receipt for each payment, with the balance that
remains. Invoices without a customer email are skipped.
"""

import logging
from typing import Callable

from core.events import PaymentRecorded

logger = logging.getLogger(__name__)


def handle_payment_recorded(email_client, company_name: str, currency_symbol: str = "€") -> Callable:
    """
    Factory that returns a PaymentRecorded handler.

    Args:
        email_client: EmailGatewayClient instance
        company_name: Trading name used to sign the receipt
        currency_symbol: Prefix for amounts

    Returns:
        Handler callable that emails a receipt
    """

    def handler(event: PaymentRecorded):
        invoice = event.invoice
        if not invoice.customer_email:
            return

        if invoice.is_paid:
            closing = "Your invoice is now paid in full. Thank you!"
        else:
            closing = f"Remaining balance: {currency_symbol}{invoice.balance_due:.2f}."

        email_client.send_email(
            to=invoice.customer_email,
            subject=f"Payment received: Invoice {invoice.invoice_number}",
            body=(
                f"Dear {invoice.customer_name},\n\n"
                f"We have received your payment of {currency_symbol}{event.amount:.2f} "
                f"against invoice {invoice.invoice_number}. {closing}\n\n"
                f"{company_name}"
            ),
        )

    return handler
